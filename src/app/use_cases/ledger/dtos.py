"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class DeductCommandDTO(BaseModel):
    """
    Command DTO for deducting points

    Used as input to DeductPoints use case.
    """

    user_id: str = Field(
        ...,
        description="Account to charge"
    )

    amount: int = Field(
        ...,
        ge=0,
        description="Points to deduct (must be >= 0)"
    )

    description: str = Field(
        ...,
        description="Reason shown in the transaction history"
    )

    related_order_id: Optional[str] = Field(
        default=None,
        description="Order this charge belongs to"
    )

    usage_delta: int = Field(
        default=1,
        ge=0,
        description="Daily-quota units consumed (0 = does not count towards quota or cooldown)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "uid_8f2c",
                "amount": 30,
                "description": "Generate Social Media Post",
                "related_order_id": "order_123",
                "usage_delta": 1
            }
        }


class RefundCommandDTO(BaseModel):
    """
    Command DTO for refunding points

    Used after a paid generation fails downstream of a successful deduction.
    """

    user_id: str = Field(
        ...,
        description="Account to refund"
    )

    amount: int = Field(
        ...,
        ge=0,
        description="Points to return (must be >= 0)"
    )

    description: str = Field(
        ...,
        description="Reason, e.g. 'Refund: Quick Edit Failed'"
    )

    related_order_id: Optional[str] = Field(
        default=None,
        description="Order the original charge belonged to"
    )

    usage_restore_count: int = Field(
        default=1,
        ge=0,
        description="Daily-quota units to give back (count never drops below 0)"
    )


class LedgerOperationResponseDTO(BaseModel):
    """
    Response DTO for balance-changing operations

    Returned by DeductPoints, RefundPoints and the admin balance operations.
    """

    transaction_id: int = Field(..., description="Ledger transaction ID")
    user_id: str = Field(..., description="Account owner")
    kind: str = Field(..., description="credit, debit or refund")
    amount: int = Field(..., description="Magnitude of the change")
    balance_before: int = Field(..., description="Balance before the change")
    balance_after: int = Field(..., description="Balance after the change")
    daily_usage_count: int = Field(..., description="Daily usage counter after the change")
    description: str = Field(..., description="Transaction reason")
    related_order_id: Optional[str] = Field(default=None, description="Related order")
    created_at: datetime = Field(..., description="Transaction timestamp")


class BalanceResponseDTO(BaseModel):
    """
    Response DTO for get balance operation

    Unknown users read as a zero balance with no last_updated.
    """

    user_id: str = Field(..., description="Account owner")
    balance: int = Field(..., description="Current points balance")
    last_updated: Optional[datetime] = Field(
        default=None,
        description="Timestamp of last account update (None for unknown users)"
    )


class TransactionDTO(BaseModel):
    id: int
    kind: str
    amount: int
    balance_after: int
    description: str
    related_order_id: Optional[str] = None
    admin_adjustment: bool = False
    created_at: datetime


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class UsageStatusResponseDTO(BaseModel):
    """Snapshot of a user's plan, quota and cooldown state"""

    user_id: str
    plan_key: str = Field(..., description="Plan whose limits apply (trial, basic, ...)")
    balance: int
    max_daily: int
    cooldown_minutes: int
    custom_limit_applied: bool
    daily_used: int = Field(..., description="Usage counted today (stale counters read as 0)")
    daily_remaining: int
    cooldown_remaining_minutes: int
    last_reset_date: Optional[date] = None


class InitializeAccountCommandDTO(BaseModel):
    """Command DTO for creating an account on first login"""

    user_id: str = Field(..., min_length=1)
    email: str = Field(..., description="Email from the identity provider")
    display_name: Optional[str] = None


class AccountResponseDTO(BaseModel):
    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    balance: int
    account_type: str
    plan_type: str
    plan_start_date: Optional[datetime] = None
    plan_end_date: Optional[datetime] = None
    custom_daily_limit: Optional[int] = None
    daily_usage_count: int
    is_admin: bool
    is_disabled: bool
    created: bool = Field(
        default=False,
        description="True when this call created the account"
    )


class LedgerDiscrepancyDTO(BaseModel):
    user_id: str
    account_balance: int
    calculated_balance: int
    discrepancy: int


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


def _plain(value):
    return value.value if isinstance(value, Enum) else value


def account_to_dto(
    account,
    created: bool = False,
    changes: Optional[Dict[str, Any]] = None,
) -> AccountResponseDTO:
    """Build the response for ``account``, overlaying ``changes`` just written for it"""
    values = {
        "user_id": account.id,
        "email": account.email,
        "display_name": account.display_name,
        "balance": account.balance,
        "account_type": _plain(account.account_type),
        "plan_type": _plain(account.plan_type),
        "plan_start_date": account.plan_start_date,
        "plan_end_date": account.plan_end_date,
        "custom_daily_limit": account.custom_daily_limit,
        "daily_usage_count": account.daily_usage_count,
        "is_admin": account.is_admin,
        "is_disabled": account.is_disabled,
    }
    for field, value in (changes or {}).items():
        if field in values and field != "user_id":
            values[field] = _plain(value)
    return AccountResponseDTO(created=created, **values)
