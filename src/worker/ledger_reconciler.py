"""Ledger Reconciliation Worker

Periodically checks every account balance against its transaction history.
Runs standalone (``python -m src.worker.ledger_reconciler``) or under a scheduler.
"""

import argparse
import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.app.use_cases.ledger import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for ledger reconciliation

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, db_uri: Optional[str] = None, session_factory=None):
        self.engine = None
        if session_factory is None:
            self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.session_factory = session_factory

    async def run_once(self) -> Optional[ReconciliationResultDTO]:
        """
        Run reconciliation once

        Returns:
            The reconciliation result, or None when reconciliation is disabled

        Raises:
            RuntimeError: If the reconciliation itself failed
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return None

        async with self.session_factory() as session:
            use_case = ReconcileLedger(
                SqlAlchemyUserAccountRepository(session),
                SqlAlchemyLedgerTransactionRepository(session),
            )
            result = await use_case.execute()

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.reason or result.error.message}")

        response = result.value
        if response.discrepancies_found > 0:
            logger.error(f"ALERT: {response.discrepancies_found} ledger discrepancies found")
        return response

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting ledger reconciliation every {interval_seconds}s")

        while True:
            try:
                result = await self.run_once()
                if result is not None:
                    logger.info(
                        f"Reconciliation cycle complete: {result.total_accounts_checked} accounts, "
                        f"{result.discrepancies_found} discrepancies, {result.execution_time_ms}ms"
                    )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs",
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker()
    try:
        if args.once:
            result = await worker.run_once()
            if result is not None:
                logger.info(
                    f"Checked {result.total_accounts_checked} accounts, "
                    f"found {result.discrepancies_found} discrepancies"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
