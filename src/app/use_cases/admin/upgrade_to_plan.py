"""UpgradeToPlan Use Case

Puts an account on a paid plan and credits the plan's points, as an admin
would after a purchase confirmed outside the system.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.domain.base import utc_now
from src.domain.errors import InvalidPlanError, LedgerError, UserNotFoundError
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.user_account import AccountType, PlanType
from src.app.use_cases.ledger.dtos import account_to_dto
from .dtos import PlanChangeResponseDTO, UpgradeToPlanCommandDTO

logger = logging.getLogger(__name__)

DEFAULT_PLAN_DURATION_DAYS = 30


def plan_display_name(plan: PlanType) -> str:
    return plan.value.title()


class UpgradeToPlan:
    """
    Use Case: Admin plan upgrade

    Business Rules:
    1. account_type = paid, plan_type = plan, plan window starts now and lasts
       plan_duration_days
    2. Credits command.points, or the plan's configured allotment
    3. The credit is journaled as "<Plan> Plan Purchase - <reason> (Admin)"
    4. plan 'none' is rejected with INVALID_PLAN
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: LedgerTransactionRepository,
        point_allotments: Optional[Dict[str, int]] = None,
        plan_duration_days: int = DEFAULT_PLAN_DURATION_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.point_allotments = point_allotments or {}
        self.plan_duration_days = plan_duration_days
        self.clock = clock

    async def execute(self, command: UpgradeToPlanCommandDTO) -> Result[PlanChangeResponseDTO]:
        try:
            response = await self.uow.run(lambda: self._upgrade(command))
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Plan upgrade failed for user {command.user_id}")
            return Return.err(
                Error(
                    code="UPGRADE_PLAN_FAILED",
                    message="Failed to upgrade plan",
                    reason=str(e),
                )
            )

        logger.info(
            f"User {command.user_id} upgraded to {command.plan.value} "
            f"with {response.points_credited} points"
        )
        return Return.ok(response)

    async def _upgrade(self, command: UpgradeToPlanCommandDTO) -> PlanChangeResponseDTO:
        if command.plan == PlanType.NONE:
            raise InvalidPlanError(command.plan.value)

        now = self.clock()

        account = await self.account_repo.get_by_id(command.user_id, for_update=True)
        if not account:
            raise UserNotFoundError(command.user_id)

        points = command.points
        if points is None:
            points = int(self.point_allotments.get(command.plan.value, 0))

        balance_after = account.balance + points
        changes = {
            "account_type": AccountType.PAID,
            "plan_type": command.plan,
            "plan_start_date": now,
            "plan_end_date": now + timedelta(days=self.plan_duration_days),
            "balance": balance_after,
            "updated_at": now,
        }
        await self.account_repo.apply_changes(account, changes)

        transaction_id = None
        if points > 0:
            transaction = await self.transaction_repo.create(
                LedgerTransaction(
                    user_id=command.user_id,
                    amount=points,
                    kind=TransactionKind.CREDIT,
                    description=(
                        f"{plan_display_name(command.plan)} Plan Purchase - "
                        f"{command.reason} (Admin)"
                    ),
                    balance_after=balance_after,
                    admin_adjustment=True,
                    performed_by=command.performed_by,
                    created_at=now,
                )
            )
            transaction_id = transaction.id

        return PlanChangeResponseDTO(
            account=account_to_dto(account, changes=changes),
            points_credited=points,
            transaction_id=transaction_id,
        )
