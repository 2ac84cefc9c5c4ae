from .user_account_repository import SqlAlchemyUserAccountRepository
from .ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from .plan_limits_repository import SqlAlchemyPlanLimitsRepository

__all__ = [
    "SqlAlchemyUserAccountRepository",
    "SqlAlchemyLedgerTransactionRepository",
    "SqlAlchemyPlanLimitsRepository",
]
