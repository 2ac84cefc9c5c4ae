"""Get Balance Use Case

Retrieves a user's current points balance.
"""

from libs.result import Result, Return
from src.app.repositories.user_account_repository import UserAccountRepository
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation. An unknown user reads as a zero balance rather
    than an error, so callers rendering a wallet never have to branch.
    """

    def __init__(self, account_repo: UserAccountRepository):
        """
        Initialize GetBalance use case

        Args:
            account_repo: Repository for accessing user accounts
        """
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Args:
            user_id: The account owner

        Returns:
            Result[BalanceResponseDTO]: Always ok; balance 0 for unknown users
        """
        account = await self.account_repo.get_by_id(user_id)

        if not account:
            return Return.ok(BalanceResponseDTO(user_id=user_id, balance=0, last_updated=None))

        return Return.ok(
            BalanceResponseDTO(
                user_id=account.id,
                balance=account.balance,
                last_updated=account.updated_at,
            )
        )
