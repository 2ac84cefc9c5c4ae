"""Unit tests for the read-only ledger use cases"""

import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.get_balance import GetBalance
from src.app.use_cases.ledger.get_usage_status import GetUsageStatus
from src.app.use_cases.ledger.list_transactions import ListTransactions
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.user_account import AccountType, PlanType, UserAccount

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
class TestGetBalance:
    async def test_returns_balance_and_last_update(self):
        updated_at = datetime(2024, 3, 9, 8, 0, 0, tzinfo=timezone.utc)
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=UserAccount(id="uid_1", balance=420, updated_at=updated_at))

        result = await GetBalance(repo).execute("uid_1")

        assert result.is_ok()
        assert result.value.balance == 420
        assert result.value.last_updated == updated_at
        repo.get_by_id.assert_called_once_with("uid_1")

    async def test_unknown_user_reads_as_zero(self):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=None)

        result = await GetBalance(repo).execute("ghost")

        assert result.is_ok()
        assert result.value.user_id == "ghost"
        assert result.value.balance == 0
        assert result.value.last_updated is None


@pytest.mark.asyncio
class TestGetUsageStatus:
    async def test_snapshot_for_paid_user(self):
        account = UserAccount(
            id="uid_1",
            balance=250,
            account_type=AccountType.PAID,
            plan_type=PlanType.PRO,
            daily_usage_count=4,
            last_reset_date=date(2024, 3, 10),
            last_usage_time=NOW - timedelta(minutes=3),
        )
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=account)
        plan_limits_repo = MagicMock()
        plan_limits_repo.get = AsyncMock(return_value=None)

        result = await GetUsageStatus(account_repo, plan_limits_repo, clock=lambda: NOW).execute("uid_1")

        assert result.is_ok()
        status = result.value
        assert status.plan_key == "pro"
        assert status.max_daily == 50
        assert status.cooldown_minutes == 10
        assert status.daily_used == 4
        assert status.daily_remaining == 46
        assert status.cooldown_remaining_minutes == 7
        assert status.custom_limit_applied is False

    async def test_stale_counter_reported_as_unused(self):
        account = UserAccount(id="uid_1", daily_usage_count=2, last_reset_date=date(2024, 3, 1))
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=account)
        plan_limits_repo = MagicMock()
        plan_limits_repo.get = AsyncMock(return_value=None)

        result = await GetUsageStatus(account_repo, plan_limits_repo, clock=lambda: NOW).execute("uid_1")

        assert result.value.plan_key == "trial"
        assert result.value.daily_used == 0
        assert result.value.daily_remaining == 2

    async def test_unknown_user(self):
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetUsageStatus(account_repo, MagicMock()).execute("ghost")

        assert result.is_err()
        assert result.error.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
class TestListTransactions:
    async def test_maps_transactions_with_pagination(self):
        transactions = [
            LedgerTransaction(
                id=2,
                user_id="uid_1",
                amount=30,
                kind=TransactionKind.REFUND,
                description="Refund: Ad Creative Failed",
                balance_after=100,
                created_at=NOW,
            ),
            LedgerTransaction(
                id=1,
                user_id="uid_1",
                amount=30,
                kind=TransactionKind.DEBIT,
                description="Generate Ad Creative",
                balance_after=70,
                created_at=NOW - timedelta(minutes=1),
            ),
        ]
        repo = MagicMock()
        repo.get_by_user_id = AsyncMock(return_value=(transactions, 12))

        result = await ListTransactions(repo).execute("uid_1", limit=2, offset=4)

        assert result.is_ok()
        assert result.value.total == 12
        assert result.value.limit == 2
        assert result.value.offset == 4
        assert [t.kind for t in result.value.transactions] == ["refund", "debit"]
        repo.get_by_user_id.assert_called_once_with(user_id="uid_1", limit=2, offset=4)
