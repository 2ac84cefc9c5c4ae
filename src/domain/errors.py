"""Ledger Domain Errors

Business-rule failures raised inside an atomic unit of work. The unit is
rolled back and the use case turns the exception into a typed ``Error``
via ``to_error()`` so callers can branch on ``code``.
"""

from typing import Any, Dict, Optional
from libs.result import Error


class LedgerError(Exception):
    code = "LEDGER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.message, details=self.details)


class UserNotFoundError(LedgerError):
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        super().__init__(f"User account {user_id} does not exist", {"user_id": user_id})
        self.user_id = user_id


class AccountDisabledError(LedgerError):
    code = "ACCOUNT_DISABLED"

    def __init__(self, user_id: str):
        super().__init__("This account has been disabled", {"user_id": user_id})
        self.user_id = user_id


class InsufficientFundsError(LedgerError):
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, balance: int, required: int):
        super().__init__(
            f"Insufficient points. Required: {required}, Available: {balance}",
            {"balance": balance, "required": required},
        )
        self.balance = balance
        self.required = required


class DailyLimitExceededError(LedgerError):
    code = "DAILY_LIMIT_EXCEEDED"

    def __init__(self, max_daily: int):
        super().__init__(
            f"Daily usage limit reached ({max_daily} per day)",
            {"max_daily": max_daily},
        )
        self.max_daily = max_daily


class CooldownActiveError(LedgerError):
    code = "COOLDOWN_ACTIVE"

    def __init__(self, remaining_minutes: int):
        super().__init__(
            f"Please wait {remaining_minutes} minute(s) before the next generation",
            {"remaining_minutes": remaining_minutes},
        )
        self.remaining_minutes = remaining_minutes


class InvalidPlanError(LedgerError):
    code = "INVALID_PLAN"

    def __init__(self, plan: str):
        super().__init__(f"Plan '{plan}' cannot be assigned", {"plan": plan})


class ConcurrentUpdateError(LedgerError):
    """The account row changed between read and write (compare-and-swap miss)."""

    code = "CONCURRENT_UPDATE"

    def __init__(self, user_id: str):
        super().__init__(f"Account {user_id} was modified concurrently", {"user_id": user_id})


class StoreContentionError(LedgerError):
    code = "STORE_CONTENTION"

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not commit after {attempts} attempts due to concurrent modification",
            {"attempts": attempts},
        )
