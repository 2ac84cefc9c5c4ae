"""RefundPoints Use Case

Returns points (and daily quota) to a user after a paid generation failed
downstream of a successful deduction.
"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.domain.base import utc_now
from src.domain.errors import LedgerError, UserNotFoundError
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from .dtos import RefundCommandDTO, LedgerOperationResponseDTO

logger = logging.getLogger(__name__)


class RefundPoints:
    """
    Use Case: Refund points to a user's balance

    Business Rules:
    1. Balance increment: balance += amount, unconditionally
    2. Quota restore: daily_usage_count -= usage_restore_count, floored at 0
    3. last_reset_date and last_usage_time are left untouched
    4. Atomic updates: account and refund record committed together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: LedgerTransactionRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.clock = clock

    async def execute(self, command: RefundCommandDTO) -> Result[LedgerOperationResponseDTO]:
        """
        Execute point refund

        Args:
            command: RefundCommandDTO with user_id, amount, description, usage_restore_count

        Returns:
            Result[LedgerOperationResponseDTO]: Success with transaction details or error
        """
        try:
            response = await self.uow.run(lambda: self._refund(command))
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Refund failed for user {command.user_id}")
            return Return.err(
                Error(
                    code="REFUND_FAILED",
                    message="Failed to refund points",
                    reason=str(e),
                )
            )

        logger.info(f"Refunded {response.amount} points to user {response.user_id}")
        return Return.ok(response)

    async def _refund(self, command: RefundCommandDTO) -> LedgerOperationResponseDTO:
        now = self.clock()

        account = await self.account_repo.get_by_id(command.user_id, for_update=True)
        if not account:
            raise UserNotFoundError(command.user_id)

        balance_before = account.balance
        balance_after = balance_before + command.amount
        daily_usage_count = max(0, (account.daily_usage_count or 0) - command.usage_restore_count)

        await self.account_repo.apply_changes(
            account,
            {
                "balance": balance_after,
                "daily_usage_count": daily_usage_count,
                "updated_at": now,
            },
        )

        transaction = await self.transaction_repo.create(
            LedgerTransaction(
                user_id=command.user_id,
                amount=command.amount,
                kind=TransactionKind.REFUND,
                description=command.description,
                related_order_id=command.related_order_id,
                balance_after=balance_after,
                created_at=now,
            )
        )

        return LedgerOperationResponseDTO(
            transaction_id=transaction.id,
            user_id=command.user_id,
            kind=TransactionKind.REFUND.value,
            amount=command.amount,
            balance_before=balance_before,
            balance_after=balance_after,
            daily_usage_count=daily_usage_count,
            description=command.description,
            related_order_id=command.related_order_id,
            created_at=transaction.created_at,
        )
