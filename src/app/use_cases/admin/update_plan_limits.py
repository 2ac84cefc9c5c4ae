"""UpdatePlanLimits Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.plan_limits_repository import PlanLimitsRepository
from src.domain.plan_limits import effective_plan_limits
from .dtos import PlanLimitsDTO, UpdatePlanLimitsCommandDTO

logger = logging.getLogger(__name__)


class UpdatePlanLimits:
    """
    Use Case: Replace the global plan limits

    The stored map is replaced as a whole (last write wins). Plans missing from
    it keep resolving to their defaults. Operations already in flight keep the
    limits they read.
    """

    def __init__(self, uow: UnitOfWork, plan_limits_repo: PlanLimitsRepository):
        self.uow = uow
        self.plan_limits_repo = plan_limits_repo

    async def execute(self, command: UpdatePlanLimitsCommandDTO) -> Result[PlanLimitsDTO]:
        limits = {plan: entry.model_dump() for plan, entry in command.limits.items()}

        try:
            setting = await self.uow.run(lambda: self.plan_limits_repo.save(limits))
        except Exception as e:
            logger.exception("Failed to update plan limits")
            return Return.err(
                Error(
                    code="UPDATE_PLAN_LIMITS_FAILED",
                    message="Failed to update plan limits",
                    reason=str(e),
                )
            )

        logger.info(
            f"Plan limits replaced by {command.performed_by or 'unknown'}: {sorted(limits)}"
        )
        return Return.ok(
            PlanLimitsDTO(
                limits=effective_plan_limits(setting.limits),
                updated_at=setting.updated_at,
            )
        )
