"""Ledger Transaction Repository Interface

Defines the contract for ledger transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple
from src.domain.ledger_transaction import LedgerTransaction


class LedgerTransactionRepository(ABC):
    """
    Repository interface for LedgerTransaction persistence

    Transactions are immutable and append-only for audit trail.
    """

    @abstractmethod
    async def create(self, transaction: LedgerTransaction) -> LedgerTransaction:
        """
        Append a transaction record

        Args:
            transaction: LedgerTransaction entity to persist

        Returns:
            Created LedgerTransaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_user_id(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[LedgerTransaction], int]:
        """
        Page of a user's transactions, most recent first, plus the total count
        """
        pass

    @abstractmethod
    async def get_net_amount_by_user(self, user_id: str) -> int:
        """
        Signed sum of a user's transactions (credits and refunds minus debits)
        """
        pass
