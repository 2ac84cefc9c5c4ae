"""Integration tests for the ledger engine against a real database

Tests cover:
- Rejections leave no trace (balance, counters and journal untouched)
- Deduct followed by refund restores balance and daily count
- Lazy daily rollover
- Every committed mutation has exactly one journal record
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.adapter.repositories.plan_limits_repository import SqlAlchemyPlanLimitsRepository
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger.deduct_points import DeductPoints
from src.app.use_cases.ledger.dtos import DeductCommandDTO, RefundCommandDTO
from src.app.use_cases.ledger.get_usage_status import GetUsageStatus
from src.app.use_cases.ledger.list_transactions import ListTransactions
from src.app.use_cases.ledger.reconcile_ledger import ReconcileLedger
from src.app.use_cases.ledger.refund_points import RefundPoints
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.user_account import AccountType, PlanType

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
TODAY = date(2024, 3, 10)


def build_deduct(session: AsyncSession, now: datetime = NOW) -> DeductPoints:
    return DeductPoints(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
        SqlAlchemyPlanLimitsRepository(session),
        clock=lambda: now,
    )


def build_refund(session: AsyncSession, now: datetime = NOW) -> RefundPoints:
    return RefundPoints(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
        clock=lambda: now,
    )


def deduct_command(amount: int, user_id: str = "uid_1", usage_delta: int = 1) -> DeductCommandDTO:
    return DeductCommandDTO(
        user_id=user_id,
        amount=amount,
        description="Generate Landing Page",
        usage_delta=usage_delta,
    )


async def journal(session: AsyncSession, user_id: str = "uid_1"):
    result = await session.execute(
        select(LedgerTransaction).where(LedgerTransaction.user_id == user_id).order_by(LedgerTransaction.id)
    )
    return list(result.scalars().all())


@pytest.mark.asyncio
class TestRejectedDeductions:
    async def test_insufficient_funds_changes_nothing(self, db_session, make_account):
        """Trial user with an empty balance cannot pay 30"""
        account = await make_account(balance=0)

        result = await build_deduct(db_session).execute(deduct_command(30))

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_FUNDS"
        await db_session.refresh(account)
        assert account.balance == 0
        assert account.daily_usage_count == 0
        assert account.version == 1
        assert await journal(db_session) == []

    async def test_daily_limit_reached(self, db_session, make_account):
        """Trial user who already used 2 of 2 today"""
        account = await make_account(daily_usage_count=2, last_reset_date=TODAY)

        result = await build_deduct(db_session).execute(deduct_command(10))

        assert result.error.code == "DAILY_LIMIT_EXCEEDED"
        assert result.error.details == {"max_daily": 2}
        await db_session.refresh(account)
        assert account.balance == 100
        assert account.daily_usage_count == 2

    async def test_cooldown_active(self, db_session, make_account):
        """Basic user who generated 5 minutes ago must wait 25 more"""
        await make_account(
            account_type=AccountType.PAID,
            plan_type=PlanType.BASIC,
            daily_usage_count=1,
            last_reset_date=TODAY,
            last_usage_time=NOW - timedelta(minutes=5),
        )

        result = await build_deduct(db_session).execute(deduct_command(10))

        assert result.error.code == "COOLDOWN_ACTIVE"
        assert result.error.details == {"remaining_minutes": 25}
        assert await journal(db_session) == []

    async def test_unknown_user(self, db_session):
        result = await build_deduct(db_session).execute(deduct_command(10, user_id="ghost"))

        assert result.error.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
class TestSuccessfulFlows:
    async def test_deduct_persists_balance_counters_and_journal(self, db_session, make_account):
        account = await make_account()

        result = await build_deduct(db_session).execute(deduct_command(30))

        assert result.is_ok()
        await db_session.refresh(account)
        assert account.balance == 70
        assert account.daily_usage_count == 1
        assert account.last_reset_date == TODAY
        assert account.last_usage_time == NOW
        assert account.version == 2

        records = await journal(db_session)
        assert len(records) == 1
        assert records[0].kind == TransactionKind.DEBIT
        assert records[0].amount == 30
        assert records[0].balance_after == 70
        assert records[0].id == result.value.transaction_id

    async def test_deduct_then_refund_restores_state(self, db_session, make_account):
        account = await make_account(daily_usage_count=1, last_reset_date=TODAY)

        deducted = await build_deduct(db_session).execute(deduct_command(30))
        refunded = await build_refund(db_session).execute(
            RefundCommandDTO(user_id="uid_1", amount=30, description="Refund: Landing Page Failed")
        )

        assert deducted.is_ok()
        assert refunded.is_ok()
        await db_session.refresh(account)
        assert account.balance == 100
        assert account.daily_usage_count == 1
        assert [r.kind for r in await journal(db_session)] == [TransactionKind.DEBIT, TransactionKind.REFUND]

    async def test_counter_rolls_over_on_a_new_day(self, db_session, make_account):
        """Yesterday's exhausted quota does not block today"""
        account = await make_account(daily_usage_count=2, last_reset_date=TODAY - timedelta(days=1))

        result = await build_deduct(db_session).execute(deduct_command(10))

        assert result.is_ok()
        await db_session.refresh(account)
        assert account.daily_usage_count == 1
        assert account.last_reset_date == TODAY

    async def test_trial_user_gets_two_generations_per_day(self, db_session, make_account):
        await make_account()
        deduct = build_deduct(db_session)

        first = await deduct.execute(deduct_command(10))
        second = await deduct.execute(deduct_command(10))
        third = await deduct.execute(deduct_command(10))
        next_day = await build_deduct(db_session, NOW + timedelta(days=1)).execute(deduct_command(10))

        assert first.is_ok()
        assert second.is_ok()
        assert third.error.code == "DAILY_LIMIT_EXCEEDED"
        assert next_day.is_ok()
        assert next_day.value.balance_after == 70

    async def test_cooldown_elapses_exactly(self, db_session, make_account):
        await make_account(account_type=AccountType.PAID, plan_type=PlanType.PRO)

        first = await build_deduct(db_session, NOW).execute(deduct_command(10))
        early = await build_deduct(db_session, NOW + timedelta(minutes=9)).execute(deduct_command(10))
        on_time = await build_deduct(db_session, NOW + timedelta(minutes=10)).execute(deduct_command(10))

        assert first.is_ok()
        assert early.error.code == "COOLDOWN_ACTIVE"
        assert early.error.details == {"remaining_minutes": 1}
        assert on_time.is_ok()

    async def test_usage_status_reflects_deductions(self, db_session, make_account):
        await make_account(account_type=AccountType.PAID, plan_type=PlanType.BASIC)
        await build_deduct(db_session).execute(deduct_command(10))

        status = await GetUsageStatus(
            SqlAlchemyUserAccountRepository(db_session),
            SqlAlchemyPlanLimitsRepository(db_session),
            clock=lambda: NOW + timedelta(minutes=12),
        ).execute("uid_1")

        assert status.is_ok()
        assert status.value.plan_key == "basic"
        assert status.value.daily_used == 1
        assert status.value.daily_remaining == 19
        assert status.value.cooldown_remaining_minutes == 18
        assert status.value.balance == 90


@pytest.mark.asyncio
class TestAuditTrail:
    async def test_every_mutation_is_journaled_and_reconciles(self, db_session, make_account):
        await make_account(balance=0, custom_daily_limit=50)
        await make_account("uid_2", balance=0, custom_daily_limit=50)

        # Seed opening balances through the journal so reconciliation holds
        transaction_repo = SqlAlchemyLedgerTransactionRepository(db_session)
        for user_id in ("uid_1", "uid_2"):
            account = await SqlAlchemyUserAccountRepository(db_session).get_by_id(user_id)
            await SqlAlchemyUserAccountRepository(db_session).apply_changes(account, {"balance": 200})
            await transaction_repo.create(
                LedgerTransaction(user_id=user_id, amount=200, kind=TransactionKind.CREDIT, balance_after=200)
            )
        await db_session.commit()

        deduct = build_deduct(db_session)
        refund = build_refund(db_session)
        outcomes = [
            await deduct.execute(deduct_command(30)),
            await deduct.execute(deduct_command(500)),
            await deduct.execute(deduct_command(45, user_id="uid_2")),
            await refund.execute(RefundCommandDTO(user_id="uid_2", amount=45, description="Refund: Failed")),
            await deduct.execute(deduct_command(20, usage_delta=0)),
        ]

        committed = [o for o in outcomes if o.is_ok()]
        assert len(committed) == 4
        records = await journal(db_session) + await journal(db_session, "uid_2")
        assert len(records) == 2 + len(committed)

        reconciliation = await ReconcileLedger(
            SqlAlchemyUserAccountRepository(db_session), transaction_repo
        ).execute()
        assert reconciliation.value.total_accounts_checked == 2
        assert reconciliation.value.discrepancies_found == 0

    async def test_reconciliation_flags_unjournaled_balance(self, db_session, make_account):
        await make_account(balance=100)

        result = await ReconcileLedger(
            SqlAlchemyUserAccountRepository(db_session),
            SqlAlchemyLedgerTransactionRepository(db_session),
        ).execute()

        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].discrepancy == 100

    async def test_history_is_newest_first(self, db_session, make_account):
        await make_account(custom_daily_limit=10)
        for minute in range(3):
            await build_deduct(db_session, NOW + timedelta(minutes=minute)).execute(deduct_command(minute + 1))

        result = await ListTransactions(SqlAlchemyLedgerTransactionRepository(db_session)).execute(
            "uid_1", limit=2, offset=0
        )

        assert result.value.total == 3
        assert [t.amount for t in result.value.transactions] == [3, 2]
