"""SetCustomDailyLimit Use Case"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.errors import LedgerError, UserNotFoundError
from src.app.use_cases.ledger.dtos import AccountResponseDTO, account_to_dto

logger = logging.getLogger(__name__)


class SetCustomDailyLimit:
    """
    Use Case: Set or clear a per-user daily limit override

    While set, the override replaces the plan's max_daily and removes the
    cooldown. None clears it.
    """

    def __init__(self, uow: UnitOfWork, account_repo: UserAccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, user_id: str, limit: Optional[int]) -> Result[AccountResponseDTO]:
        if limit is not None and limit < 0:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="Daily limit must be >= 0",
                    details={"limit": limit},
                )
            )

        async def work():
            account = await self.account_repo.get_by_id(user_id, for_update=True)
            if not account:
                raise UserNotFoundError(user_id)
            changes = {"custom_daily_limit": limit}
            await self.account_repo.apply_changes(account, changes)
            return account_to_dto(account, changes=changes)

        try:
            response = await self.uow.run(work)
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Failed to set custom daily limit for user {user_id}")
            return Return.err(
                Error(
                    code="SET_DAILY_LIMIT_FAILED",
                    message="Failed to update daily limit",
                    reason=str(e),
                )
            )

        if limit is None:
            logger.info(f"Cleared custom daily limit for user {user_id}")
        else:
            logger.info(f"Set custom daily limit {limit} for user {user_id}")
        return Return.ok(response)
