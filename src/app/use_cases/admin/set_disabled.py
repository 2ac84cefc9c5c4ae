"""SetDisabled Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.errors import LedgerError, UserNotFoundError
from src.app.use_cases.ledger.dtos import AccountResponseDTO, account_to_dto

logger = logging.getLogger(__name__)


class SetDisabled:
    """Flip the disabled flag. Enforcement happens in the caller layer."""

    def __init__(self, uow: UnitOfWork, account_repo: UserAccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, user_id: str, disabled: bool) -> Result[AccountResponseDTO]:
        async def work():
            account = await self.account_repo.get_by_id(user_id, for_update=True)
            if not account:
                raise UserNotFoundError(user_id)
            changes = {"is_disabled": disabled}
            await self.account_repo.apply_changes(account, changes)
            return account_to_dto(account, changes=changes)

        try:
            response = await self.uow.run(work)
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Failed to set disabled={disabled} for user {user_id}")
            return Return.err(
                Error(
                    code="SET_DISABLED_FAILED",
                    message="Failed to update account status",
                    reason=str(e),
                )
            )

        logger.info(f"User {user_id} {'disabled' if disabled else 'enabled'}")
        return Return.ok(response)
