"""Plan Limits Repository Interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from src.domain.plan_limits import PlanLimitsSetting


class PlanLimitsRepository(ABC):
    """Reads and replaces the single global plan-limits record"""

    @abstractmethod
    async def get(self) -> Optional[PlanLimitsSetting]:
        pass

    @abstractmethod
    async def save(self, limits: Dict[str, Any]) -> PlanLimitsSetting:
        pass
