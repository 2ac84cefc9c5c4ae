"""
List Transactions Use Case

Retrieves a user's ledger history with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from .dtos import ListTransactionsResponseDTO, TransactionDTO


class ListTransactions:
    """
    Use case: View ledger transactions

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: LedgerTransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions for a user with pagination.

        Args:
            user_id: Account owner
            limit: Maximum number of transactions to return (default 20)
            offset: Number of transactions to skip (default 0)

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        transactions, total = await self.transaction_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
        )

        transaction_dtos = [
            TransactionDTO(
                id=txn.id,
                kind=txn.kind.value if hasattr(txn.kind, "value") else txn.kind,
                amount=txn.amount,
                balance_after=txn.balance_after,
                description=txn.description,
                related_order_id=txn.related_order_id,
                admin_adjustment=txn.admin_adjustment,
                created_at=txn.created_at,
            )
            for txn in transactions
        ]

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=transaction_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
