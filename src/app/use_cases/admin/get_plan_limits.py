"""GetPlanLimits Use Case"""

from libs.result import Result, Return
from src.app.repositories.plan_limits_repository import PlanLimitsRepository
from src.domain.plan_limits import effective_plan_limits
from .dtos import PlanLimitsDTO


class GetPlanLimits:
    """Effective limits for every known plan; unset keys come from the defaults"""

    def __init__(self, plan_limits_repo: PlanLimitsRepository):
        self.plan_limits_repo = plan_limits_repo

    async def execute(self) -> Result[PlanLimitsDTO]:
        setting = await self.plan_limits_repo.get()
        stored = setting.limits if setting else None
        return Return.ok(
            PlanLimitsDTO(
                limits=effective_plan_limits(stored),
                updated_at=setting.updated_at if setting else None,
            )
        )
