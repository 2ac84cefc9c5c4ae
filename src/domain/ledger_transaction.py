"""Ledger Transaction Domain Entity

Immutable append-only audit trail. Every balance mutation writes exactly one
record in the same database transaction as the balance change.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Integer, String
from src.domain.base import BaseModel, UTCDateTime, utc_now


class TransactionKind(str, Enum):
    """Ledger transaction kinds"""
    CREDIT = "credit"    # Points added (plan purchase, bonus, admin credit)
    DEBIT = "debit"      # Points spent or removed by an admin
    REFUND = "refund"    # Points returned after a failed generation


class LedgerTransaction(BaseModel, table=True):
    """
    Ledger Transaction - Immutable record of one balance change

    Domain Rules:
    - amount is always the non-negative magnitude; kind gives the direction
    - admin_adjustment marks writes made through the admin façade
    - balance_after snapshots the balance right after this change
    """

    __tablename__ = "ledger_transactions"
    __table_args__ = (
        Index('ix_ledger_transactions_user_created', 'user_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        description="Auto-increment transaction id"
    )

    user_id: str = Field(
        sa_column=Column(String(128), nullable=False, index=True),
        description="Owner of the balance that changed"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Magnitude of the change (>= 0)"
    )

    kind: TransactionKind = Field(description="credit, debit or refund")

    description: str = Field(
        default="",
        sa_column=Column(String(500), nullable=False, default=""),
        description="Free text reason"
    )

    related_order_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(128), nullable=True),
        description="Order this change belongs to, if any"
    )

    balance_after: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance right after this change"
    )

    admin_adjustment: bool = Field(default=False)

    performed_by: Optional[str] = Field(
        default=None,
        description="Admin user id for façade writes"
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False))

    @property
    def signed_amount(self) -> int:
        if self.kind == TransactionKind.DEBIT:
            return -self.amount
        return self.amount
