"""DowngradeToTrial Use Case"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.base import utc_now
from src.domain.errors import LedgerError, UserNotFoundError
from src.domain.user_account import AccountType, PlanType
from src.app.use_cases.ledger.dtos import AccountResponseDTO, account_to_dto

logger = logging.getLogger(__name__)


class DowngradeToTrial:
    """
    Use Case: Move an account back to trial

    The balance is kept and nothing is journaled; only the plan fields change.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.clock = clock

    async def execute(self, user_id: str) -> Result[AccountResponseDTO]:
        try:
            response = await self.uow.run(lambda: self._downgrade(user_id))
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Downgrade failed for user {user_id}")
            return Return.err(
                Error(
                    code="DOWNGRADE_FAILED",
                    message="Failed to downgrade account",
                    reason=str(e),
                )
            )

        logger.info(f"User {user_id} downgraded to trial")
        return Return.ok(response)

    async def _downgrade(self, user_id: str) -> AccountResponseDTO:
        account = await self.account_repo.get_by_id(user_id, for_update=True)
        if not account:
            raise UserNotFoundError(user_id)

        changes = {
            "account_type": AccountType.TRIAL,
            "plan_type": PlanType.NONE,
            "plan_start_date": None,
            "plan_end_date": None,
            "updated_at": self.clock(),
        }
        await self.account_repo.apply_changes(account, changes)
        return account_to_dto(account, changes=changes)
