"""
List Users Use Case

Accounts for the admin dashboard, newest first.
"""
from libs.result import Result, Return
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.use_cases.ledger.dtos import account_to_dto
from .dtos import ListUsersResponseDTO


class ListUsers:
    """
    Use case: Browse all accounts

    Accounts are ordered by created_at DESC (most recently created first).
    """

    def __init__(self, account_repo: UserAccountRepository):
        self.account_repo = account_repo

    async def execute(self, limit: int = 50, offset: int = 0) -> Result[ListUsersResponseDTO]:
        accounts, total = await self.account_repo.list_accounts(limit=limit, offset=offset)

        return Return.ok(
            ListUsersResponseDTO(
                users=[account_to_dto(account) for account in accounts],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
