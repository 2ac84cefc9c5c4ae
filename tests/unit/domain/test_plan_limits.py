"""Unit tests for plan limit resolution"""

from src.domain.plan_limits import (
    DEFAULT_PLAN_LIMITS,
    Limits,
    effective_plan_limits,
    limits_for_plan,
    resolve_limits,
    resolve_plan_key,
)
from src.domain.user_account import AccountType, PlanType, UserAccount


def make_account(**overrides) -> UserAccount:
    data = {"id": "uid_1", "balance": 100}
    data.update(overrides)
    return UserAccount(**data)


class TestResolvePriority:
    """Custom limit > paid plan > trial"""

    def test_custom_limit_wins_and_disables_cooldown(self):
        account = make_account(
            account_type=AccountType.PAID,
            plan_type=PlanType.PRO,
            custom_daily_limit=7,
        )

        assert resolve_limits(account) == Limits(max_daily=7, cooldown_minutes=0)

    def test_custom_limit_of_zero_is_respected(self):
        account = make_account(custom_daily_limit=0)

        assert resolve_limits(account) == Limits(max_daily=0, cooldown_minutes=0)

    def test_paid_account_uses_its_plan(self):
        account = make_account(account_type=AccountType.PAID, plan_type=PlanType.PRO)

        assert resolve_plan_key(account) == "pro"
        assert resolve_limits(account) == Limits(max_daily=50, cooldown_minutes=10)

    def test_paid_account_with_e_commerce_plan(self):
        account = make_account(account_type=AccountType.PAID, plan_type=PlanType.E_COMMERCE)

        assert resolve_limits(account) == Limits(max_daily=100, cooldown_minutes=5)

    def test_paid_account_without_plan_falls_back_to_basic(self):
        account = make_account(account_type=AccountType.PAID, plan_type=PlanType.NONE)

        assert resolve_plan_key(account) == "basic"
        assert resolve_limits(account) == Limits(max_daily=20, cooldown_minutes=30)

    def test_trial_account_ignores_plan_type(self):
        account = make_account(account_type=AccountType.TRIAL, plan_type=PlanType.ELITE)

        assert resolve_plan_key(account) == "trial"
        assert resolve_limits(account) == Limits(max_daily=2, cooldown_minutes=0)


class TestGlobalPlanLimits:
    """Stored limits override defaults field by field"""

    def test_stored_limits_take_precedence(self):
        account = make_account(account_type=AccountType.PAID, plan_type=PlanType.BASIC)
        stored = {"basic": {"max_daily": 5, "cooldown_minutes": 1}}

        assert resolve_limits(account, stored) == Limits(max_daily=5, cooldown_minutes=1)

    def test_missing_field_falls_back_to_default(self):
        stored = {"pro": {"max_daily": 60}}

        assert limits_for_plan("pro", stored) == Limits(max_daily=60, cooldown_minutes=10)

    def test_missing_plan_falls_back_to_default(self):
        stored = {"basic": {"max_daily": 5, "cooldown_minutes": 1}}

        assert limits_for_plan("elite", stored) == Limits(max_daily=9999, cooldown_minutes=0)

    def test_none_and_empty_maps_use_defaults(self):
        account = make_account()

        assert resolve_limits(account, None) == Limits(max_daily=2, cooldown_minutes=0)
        assert resolve_limits(account, {}) == Limits(max_daily=2, cooldown_minutes=0)

    def test_plan_known_only_to_stored_map_is_used(self):
        account = make_account(account_type=AccountType.PAID, plan_type=PlanType.PRO)
        stored = {"pro": {"max_daily": 3, "cooldown_minutes": 2}}

        assert resolve_plan_key(account, stored) == "pro"
        assert resolve_limits(account, stored) == Limits(max_daily=3, cooldown_minutes=2)

    def test_effective_plan_limits_merges_defaults(self):
        stored = {"basic": {"max_daily": 5, "cooldown_minutes": 1}, "studio": {"max_daily": 8}}

        effective = effective_plan_limits(stored)

        assert set(effective) == set(DEFAULT_PLAN_LIMITS) | {"studio"}
        assert effective["basic"] == {"max_daily": 5, "cooldown_minutes": 1}
        assert effective["trial"] == DEFAULT_PLAN_LIMITS["trial"]
        # unknown plans borrow missing fields from basic
        assert effective["studio"] == {"max_daily": 8, "cooldown_minutes": 30}
