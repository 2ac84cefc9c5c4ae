"""DeductPoints Use Case

Charges points for a generation and consumes daily quota, enforcing balance,
daily limit and cooldown inside a single atomic unit of work.
"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.app.repositories.plan_limits_repository import PlanLimitsRepository
from src.domain.base import utc_now
from src.domain.errors import (
    AccountDisabledError,
    CooldownActiveError,
    DailyLimitExceededError,
    InsufficientFundsError,
    LedgerError,
    UserNotFoundError,
)
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.plan_limits import resolve_limits
from src.domain.usage_window import cooldown_remaining_minutes, current_daily_count, today_utc
from .dtos import DeductCommandDTO, LedgerOperationResponseDTO
from .plan_limits_loader import load_plan_limits

logger = logging.getLogger(__name__)


class DeductPoints:
    """
    Use Case: Deduct points from a user's balance

    Business Rules (checked in this order):
    1. Account must exist (and be enabled, when enforce_enabled is set)
    2. Sufficient balance: balance >= amount
    3. Daily quota: today's usage + usage_delta <= max_daily
    4. Cooldown: at least cooldown_minutes since the last quota-consuming deduction
       (only when usage_delta > 0)

    Flow (one atomic unit, re-run by the unit of work on contention):
    1. Load account with lock
    2. Resolve limits from the global plan limits
    3. Apply lazy daily reset and validate
    4. Compare-and-swap the account row
    5. Append debit transaction
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: LedgerTransactionRepository,
        plan_limits_repo: PlanLimitsRepository,
        clock: Callable[[], datetime] = utc_now,
        enforce_enabled: bool = False,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.plan_limits_repo = plan_limits_repo
        self.clock = clock
        self.enforce_enabled = enforce_enabled

    async def execute(self, command: DeductCommandDTO) -> Result[LedgerOperationResponseDTO]:
        """
        Execute point deduction

        Args:
            command: DeductCommandDTO with user_id, amount, description, usage_delta

        Returns:
            Result[LedgerOperationResponseDTO]: Success with transaction details, or one of
            USER_NOT_FOUND, ACCOUNT_DISABLED, INSUFFICIENT_FUNDS, DAILY_LIMIT_EXCEEDED, COOLDOWN_ACTIVE,
            STORE_CONTENTION, DEDUCT_FAILED
        """
        try:
            response = await self.uow.run(lambda: self._deduct(command))
        except LedgerError as e:
            logger.info(f"Deduction rejected for user {command.user_id}: {e.code}")
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Deduction failed for user {command.user_id}")
            return Return.err(
                Error(
                    code="DEDUCT_FAILED",
                    message="Failed to deduct points",
                    reason=str(e),
                )
            )

        logger.info(
            f"Deducted {response.amount} points from user {response.user_id} "
            f"(balance {response.balance_before} -> {response.balance_after})"
        )
        return Return.ok(response)

    async def _deduct(self, command: DeductCommandDTO) -> LedgerOperationResponseDTO:
        now = self.clock()

        account = await self.account_repo.get_by_id(command.user_id, for_update=True)
        if not account:
            raise UserNotFoundError(command.user_id)

        if self.enforce_enabled and account.is_disabled:
            raise AccountDisabledError(command.user_id)

        if account.balance < command.amount:
            logger.warning(
                f"Insufficient funds for user {command.user_id}: "
                f"balance={account.balance}, required={command.amount}"
            )
            raise InsufficientFundsError(account.balance, command.amount)

        limits = resolve_limits(account, await load_plan_limits(self.plan_limits_repo))

        today = today_utc(now)
        current_count = current_daily_count(account, today)
        if current_count + command.usage_delta > limits.max_daily:
            raise DailyLimitExceededError(limits.max_daily)

        if command.usage_delta > 0:
            remaining = cooldown_remaining_minutes(
                account.last_usage_time, limits.cooldown_minutes, now
            )
            if remaining > 0:
                raise CooldownActiveError(remaining)

        balance_before = account.balance
        balance_after = balance_before - command.amount
        daily_usage_count = current_count + command.usage_delta

        changes = {
            "balance": balance_after,
            "daily_usage_count": daily_usage_count,
            "last_reset_date": today,
            "updated_at": now,
        }
        if command.usage_delta > 0:
            changes["last_usage_time"] = now

        await self.account_repo.apply_changes(account, changes)

        transaction = await self.transaction_repo.create(
            LedgerTransaction(
                user_id=command.user_id,
                amount=command.amount,
                kind=TransactionKind.DEBIT,
                description=command.description,
                related_order_id=command.related_order_id,
                balance_after=balance_after,
                created_at=now,
            )
        )

        return LedgerOperationResponseDTO(
            transaction_id=transaction.id,
            user_id=command.user_id,
            kind=TransactionKind.DEBIT.value,
            amount=command.amount,
            balance_before=balance_before,
            balance_after=balance_after,
            daily_usage_count=daily_usage_count,
            description=command.description,
            related_order_id=command.related_order_id,
            created_at=transaction.created_at,
        )
