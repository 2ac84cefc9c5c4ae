from .user_account_repository import UserAccountRepository
from .ledger_transaction_repository import LedgerTransactionRepository
from .plan_limits_repository import PlanLimitsRepository

__all__ = [
    "UserAccountRepository",
    "LedgerTransactionRepository",
    "PlanLimitsRepository",
]
