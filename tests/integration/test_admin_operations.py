"""Integration tests for the admin façade and account bootstrap"""

import pytest
from datetime import datetime, timedelta, timezone

from sqlmodel import select
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.adapter.repositories.plan_limits_repository import SqlAlchemyPlanLimitsRepository
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.admin.adjust_balance import AdjustBalance
from src.app.use_cases.admin.downgrade_to_trial import DowngradeToTrial
from src.app.use_cases.admin.dtos import (
    AdjustBalanceCommandDTO,
    PlanLimitEntryDTO,
    UpdatePlanLimitsCommandDTO,
    UpgradeToPlanCommandDTO,
)
from src.app.use_cases.admin.get_plan_limits import GetPlanLimits
from src.app.use_cases.admin.set_custom_daily_limit import SetCustomDailyLimit
from src.app.use_cases.admin.update_plan_limits import UpdatePlanLimits
from src.app.use_cases.admin.upgrade_to_plan import UpgradeToPlan
from src.app.use_cases.ledger.deduct_points import DeductPoints
from src.app.use_cases.ledger.dtos import DeductCommandDTO, InitializeAccountCommandDTO
from src.app.use_cases.ledger.initialize_account import InitializeAccount
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.user_account import AccountType, PlanType

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def repos(session):
    return (
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
    )


async def deduct(session, amount: int = 10):
    uow, account_repo, transaction_repo = repos(session)
    use_case = DeductPoints(
        uow, account_repo, transaction_repo, SqlAlchemyPlanLimitsRepository(session), clock=lambda: NOW
    )
    return await use_case.execute(DeductCommandDTO(user_id="uid_1", amount=amount, description="Generate"))


@pytest.mark.asyncio
class TestAdminAdjustments:
    async def test_negative_adjustment_is_unchecked(self, db_session, make_account):
        """Admin adjusts a 30 point balance by -50"""
        account = await make_account(balance=30)

        result = await AdjustBalance(*repos(db_session), clock=lambda: NOW).execute(
            AdjustBalanceCommandDTO(user_id="uid_1", delta=-50, reason="correction", performed_by="uid_admin")
        )

        assert result.is_ok()
        await db_session.refresh(account)
        assert account.balance == -20

        records = (await db_session.execute(select(LedgerTransaction))).scalars().all()
        assert len(records) == 1
        assert records[0].kind == TransactionKind.DEBIT
        assert records[0].amount == 50
        assert records[0].admin_adjustment is True
        assert records[0].performed_by == "uid_admin"
        assert records[0].description == "correction (Admin Adjustment)"

    async def test_upgrade_then_downgrade(self, db_session, make_account):
        account = await make_account(balance=10)

        upgraded = await UpgradeToPlan(
            *repos(db_session),
            point_allotments={"elite": 5000},
            plan_duration_days=30,
            clock=lambda: NOW,
        ).execute(UpgradeToPlanCommandDTO(user_id="uid_1", plan=PlanType.ELITE, reason="Order 9"))

        assert upgraded.is_ok()
        await db_session.refresh(account)
        assert account.account_type == AccountType.PAID
        assert account.plan_type == PlanType.ELITE
        assert account.balance == 5010
        assert account.plan_end_date == NOW + timedelta(days=30)

        downgraded = await DowngradeToTrial(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyUserAccountRepository(db_session)
        ).execute("uid_1")

        assert downgraded.is_ok()
        await db_session.refresh(account)
        assert account.account_type == AccountType.TRIAL
        assert account.plan_type == PlanType.NONE
        assert account.plan_start_date is None
        assert account.balance == 5010

        records = (await db_session.execute(select(LedgerTransaction))).scalars().all()
        assert [r.description for r in records] == ["Elite Plan Purchase - Order 9 (Admin)"]

    async def test_custom_limit_overrides_plan(self, db_session, make_account):
        await make_account(daily_usage_count=2, last_reset_date=NOW.date())

        blocked = await deduct(db_session)
        await SetCustomDailyLimit(SqlAlchemyUnitOfWork(db_session), SqlAlchemyUserAccountRepository(db_session)).execute(
            "uid_1", 3
        )
        allowed = await deduct(db_session)

        assert blocked.error.code == "DAILY_LIMIT_EXCEEDED"
        assert allowed.is_ok()
        assert allowed.value.daily_usage_count == 3


@pytest.mark.asyncio
class TestPlanLimitsSettings:
    async def test_updated_limits_govern_deductions(self, db_session, make_account):
        await make_account(daily_usage_count=2, last_reset_date=NOW.date())

        updated = await UpdatePlanLimits(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyPlanLimitsRepository(db_session)
        ).execute(
            UpdatePlanLimitsCommandDTO(limits={"trial": PlanLimitEntryDTO(max_daily=5, cooldown_minutes=0)})
        )
        result = await deduct(db_session)

        assert updated.is_ok()
        assert result.is_ok()
        assert result.value.daily_usage_count == 3

    async def test_replace_keeps_defaults_for_missing_plans(self, db_session):
        plan_limits_repo = SqlAlchemyPlanLimitsRepository(db_session)
        uow = SqlAlchemyUnitOfWork(db_session)

        await UpdatePlanLimits(uow, plan_limits_repo).execute(
            UpdatePlanLimitsCommandDTO(limits={"pro": PlanLimitEntryDTO(max_daily=70, cooldown_minutes=2)})
        )
        await UpdatePlanLimits(uow, plan_limits_repo).execute(
            UpdatePlanLimitsCommandDTO(limits={"basic": PlanLimitEntryDTO(max_daily=25, cooldown_minutes=15)})
        )
        current = await GetPlanLimits(plan_limits_repo).execute()

        assert current.value.limits["basic"].max_daily == 25
        # last write replaced the whole map
        assert current.value.limits["pro"].max_daily == 50
        assert current.value.updated_at is not None


@pytest.mark.asyncio
class TestInitializeAccount:
    async def test_first_login_creates_account_once(self, db_session):
        use_case = InitializeAccount(*repos(db_session), clock=lambda: NOW)
        command = InitializeAccountCommandDTO(user_id="uid_1", email="jane@example.com")

        first = await use_case.execute(command)
        second = await use_case.execute(command)

        assert first.value.created is True
        assert second.value.created is False
        account = await SqlAlchemyUserAccountRepository(db_session).get_by_id("uid_1")
        assert account.balance == 0
        assert account.version == 2

    async def test_bootstrap_admin_receives_welcome_bonus(self, db_session):
        use_case = InitializeAccount(
            *repos(db_session),
            bootstrap_admin_email="owner@example.com",
            admin_welcome_bonus=5000,
            clock=lambda: NOW,
        )

        result = await use_case.execute(
            InitializeAccountCommandDTO(user_id="uid_admin", email="OWNER@example.com")
        )

        assert result.value.is_admin is True
        assert result.value.balance == 5000
        records = (await db_session.execute(select(LedgerTransaction))).scalars().all()
        assert len(records) == 1
        assert records[0].description == "Welcome Bonus (Admin)"
        assert records[0].balance_after == 5000
