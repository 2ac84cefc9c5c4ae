"""ReconcileLedger Use Case

Checks every account balance against the sum of its ledger transactions.
"""

import logging
import time
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.domain.base import utc_now
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile account balances against the audit trail

    Business Rules:
    1. Expected balance = credits + refunds - debits for the account
    2. Any mismatch is recorded and logged as a discrepancy
    3. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        transaction_repo: LedgerTransactionRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.clock = clock

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = self.clock()

        try:
            logger.info("Starting ledger reconciliation")

            accounts = await self.account_repo.get_all()
            discrepancies: list[LedgerDiscrepancyDTO] = []

            for account in accounts:
                calculated = await self.transaction_repo.get_net_amount_by_user(account.id)

                if account.balance != calculated:
                    discrepancy = LedgerDiscrepancyDTO(
                        user_id=account.id,
                        account_balance=account.balance,
                        calculated_balance=calculated,
                        discrepancy=account.balance - calculated,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for user {account.id}: "
                        f"balance={account.balance}, "
                        f"transaction_sum={calculated}, "
                        f"discrepancy={discrepancy.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(accounts)} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(accounts)} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=len(accounts),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile ledger",
                    reason=str(e),
                )
            )
