"""User Account Repository Interface

Defines the contract for user account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from src.domain.user_account import UserAccount


class UserAccountRepository(ABC):
    """
    Repository interface for UserAccount persistence

    Mutations go through ``apply_changes``, a compare-and-swap on the
    account's version. Reads may lock the row (SELECT FOR UPDATE) where the
    store supports it.
    """

    @abstractmethod
    async def get_by_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID

        Args:
            user_id: Identity-provider user id
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            UserAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: UserAccount) -> UserAccount:
        """
        Create a new account

        Raises:
            ConcurrentUpdateError: If an account with the same id was created concurrently
        """
        pass

    @abstractmethod
    async def apply_changes(self, account: UserAccount, changes: Dict[str, Any]) -> None:
        """
        Write ``changes`` if the stored version still equals ``account.version``

        Bumps the version and updated_at.

        Raises:
            ConcurrentUpdateError: If the row was modified since it was read
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[UserAccount]:
        """Retrieve every account (used by reconciliation)"""
        pass

    @abstractmethod
    async def list_accounts(self, limit: int = 50, offset: int = 0) -> Tuple[List[UserAccount], int]:
        """
        Retrieve accounts newest first, with pagination

        Returns:
            Tuple of (list of UserAccount, total count)
        """
        pass
