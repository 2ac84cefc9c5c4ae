"""SQLAlchemy implementation of PlanLimitsRepository"""

from typing import Any, Dict, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.plan_limits_repository import PlanLimitsRepository
from src.domain.base import utc_now
from src.domain.plan_limits import PLAN_LIMITS_KEY, PlanLimitsSetting


class SqlAlchemyPlanLimitsRepository(PlanLimitsRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> Optional[PlanLimitsSetting]:
        stmt = (
            select(PlanLimitsSetting)
            .where(PlanLimitsSetting.id == PLAN_LIMITS_KEY)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, limits: Dict[str, Any]) -> PlanLimitsSetting:
        """Replace the stored map (last write wins)"""
        setting = await self.get()
        if setting is None:
            setting = PlanLimitsSetting(id=PLAN_LIMITS_KEY, limits=dict(limits))
        else:
            setting.limits = dict(limits)
            setting.updated_at = utc_now()

        self.session.add(setting)
        await self.session.flush()
        await self.session.refresh(setting)
        return setting
