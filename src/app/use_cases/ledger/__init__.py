"""Ledger use cases"""
from .deduct_points import DeductPoints
from .refund_points import RefundPoints
from .get_balance import GetBalance
from .list_transactions import ListTransactions
from .get_usage_status import GetUsageStatus
from .initialize_account import InitializeAccount
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    DeductCommandDTO,
    RefundCommandDTO,
    LedgerOperationResponseDTO,
    BalanceResponseDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    UsageStatusResponseDTO,
    InitializeAccountCommandDTO,
    AccountResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "DeductPoints",
    "RefundPoints",
    "GetBalance",
    "ListTransactions",
    "GetUsageStatus",
    "InitializeAccount",
    "ReconcileLedger",
    "DeductCommandDTO",
    "RefundCommandDTO",
    "LedgerOperationResponseDTO",
    "BalanceResponseDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "UsageStatusResponseDTO",
    "InitializeAccountCommandDTO",
    "AccountResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
