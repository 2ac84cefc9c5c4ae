"""AdjustBalance Use Case

Manual credit or debit of a user's balance by an admin.
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
from src.app.use_cases.ledger.dtos import LedgerOperationResponseDTO
from .dtos import AdjustBalanceCommandDTO

logger = logging.getLogger(__name__)


class AdjustBalance:
    """
    Use Case: Admin balance adjustment

    Business Rules:
    1. balance += delta, unchecked (the result may be negative)
    2. No quota or cooldown checks, daily counters untouched
    3. Journal: credit for delta >= 0, debit otherwise, amount = |delta|,
       tagged admin_adjustment with the acting admin
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

    async def execute(self, command: AdjustBalanceCommandDTO) -> Result[LedgerOperationResponseDTO]:
        try:
            response = await self.uow.run(lambda: self._adjust(command))
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Admin adjustment failed for user {command.user_id}")
            return Return.err(
                Error(
                    code="ADJUST_BALANCE_FAILED",
                    message="Failed to adjust balance",
                    reason=str(e),
                )
            )

        logger.info(
            f"Admin {command.performed_by or 'unknown'} adjusted balance of user "
            f"{command.user_id} by {command.delta} (now {response.balance_after})"
        )
        return Return.ok(response)

    async def _adjust(self, command: AdjustBalanceCommandDTO) -> LedgerOperationResponseDTO:
        now = self.clock()

        account = await self.account_repo.get_by_id(command.user_id, for_update=True)
        if not account:
            raise UserNotFoundError(command.user_id)

        balance_before = account.balance
        balance_after = balance_before + command.delta
        kind = TransactionKind.CREDIT if command.delta >= 0 else TransactionKind.DEBIT
        description = f"{command.reason} (Admin Adjustment)"

        await self.account_repo.apply_changes(
            account, {"balance": balance_after, "updated_at": now}
        )

        transaction = await self.transaction_repo.create(
            LedgerTransaction(
                user_id=command.user_id,
                amount=abs(command.delta),
                kind=kind,
                description=description,
                balance_after=balance_after,
                admin_adjustment=True,
                performed_by=command.performed_by,
                created_at=now,
            )
        )

        return LedgerOperationResponseDTO(
            transaction_id=transaction.id,
            user_id=command.user_id,
            kind=kind.value,
            amount=abs(command.delta),
            balance_before=balance_before,
            balance_after=balance_after,
            daily_usage_count=account.daily_usage_count,
            description=description,
            created_at=transaction.created_at,
        )
