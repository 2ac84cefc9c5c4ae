from .base import BaseModel, utc_now
from .user_account import UserAccount, AccountType, PlanType
from .ledger_transaction import LedgerTransaction, TransactionKind
from .plan_limits import (
    PlanLimitsSetting,
    Limits,
    DEFAULT_PLAN_LIMITS,
    resolve_limits,
    resolve_plan_key,
)

__all__ = [
    "BaseModel",
    "utc_now",
    "UserAccount",
    "AccountType",
    "PlanType",
    "LedgerTransaction",
    "TransactionKind",
    "PlanLimitsSetting",
    "Limits",
    "DEFAULT_PLAN_LIMITS",
    "resolve_limits",
    "resolve_plan_key",
]
