"""SQLAlchemy implementation of LedgerTransactionRepository

Append-only persistence for the ledger audit trail.
"""

from typing import List, Tuple
from sqlalchemy import case
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind


class SqlAlchemyLedgerTransactionRepository(LedgerTransactionRepository):
    """
    SQLAlchemy implementation of LedgerTransactionRepository

    Records are only ever inserted; the session's transaction makes the
    insert commit or roll back together with the balance change.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: LedgerTransaction) -> LedgerTransaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_user_id(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[LedgerTransaction], int]:
        """
        Retrieve a user's transactions with pagination

        Args:
            user_id: Account owner
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (list of LedgerTransaction, total count)
        """
        count_stmt = select(func.count()).select_from(LedgerTransaction).where(
            LedgerTransaction.user_id == user_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        # Most recent first; id breaks ties between records of the same instant
        stmt = (
            select(LedgerTransaction)
            .where(LedgerTransaction.user_id == user_id)
            .order_by(LedgerTransaction.created_at.desc(), LedgerTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        transactions = list(result.scalars().all())

        return transactions, total

    async def get_net_amount_by_user(self, user_id: str) -> int:
        signed_amount = case(
            (LedgerTransaction.kind == TransactionKind.DEBIT, -LedgerTransaction.amount),
            else_=LedgerTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed_amount), 0)).where(
            LedgerTransaction.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
