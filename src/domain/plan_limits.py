"""Plan Limits

Global plan-tier configuration (one persisted record) and the pure resolver
that turns an account plus that configuration into the limits governing it.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, NamedTuple, Optional
from sqlmodel import Field, Column
from sqlalchemy import JSON, String
from src.domain.base import BaseModel, UTCDateTime, utc_now
from src.domain.user_account import AccountType, PlanType, UserAccount

PLAN_LIMITS_KEY = "plan_limits"

TRIAL_PLAN_KEY = "trial"
FALLBACK_PAID_PLAN_KEY = PlanType.BASIC.value

# Used whenever the global record is missing, unreadable, or lacks a key/field.
# 9999 is the "unlimited" marker the usage card renders as infinity.
DEFAULT_PLAN_LIMITS: Dict[str, Dict[str, int]] = {
    "trial": {"max_daily": 2, "cooldown_minutes": 0},
    "basic": {"max_daily": 20, "cooldown_minutes": 30},
    "pro": {"max_daily": 50, "cooldown_minutes": 10},
    "elite": {"max_daily": 9999, "cooldown_minutes": 0},
    "e-commerce": {"max_daily": 100, "cooldown_minutes": 5},
}


class Limits(NamedTuple):
    max_daily: int
    cooldown_minutes: int


class PlanLimitsSetting(BaseModel, table=True):
    """
    Plan Limits Setting - global plan-tier limits, last write wins

    Stored as a single row keyed by PLAN_LIMITS_KEY. ``limits`` maps a plan key
    to ``{"max_daily": int, "cooldown_minutes": int}``.
    """

    __tablename__ = "plan_limit_settings"

    id: str = Field(
        default=PLAN_LIMITS_KEY,
        sa_column=Column(String(64), primary_key=True),
    )

    limits: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False))


def _known_plan_keys(plan_limits: Optional[Mapping[str, Any]]) -> set:
    keys = set(DEFAULT_PLAN_LIMITS)
    if plan_limits:
        keys.update(plan_limits)
    return keys


def resolve_plan_key(account: UserAccount, plan_limits: Optional[Mapping[str, Any]] = None) -> str:
    """Plan key whose limits apply to the account (ignores custom overrides)."""
    if account.account_type == AccountType.PAID:
        plan = account.plan_type.value if isinstance(account.plan_type, PlanType) else account.plan_type
        if plan and plan != PlanType.NONE.value and plan in _known_plan_keys(plan_limits):
            return plan
        return FALLBACK_PAID_PLAN_KEY
    return TRIAL_PLAN_KEY


def limits_for_plan(plan_key: str, plan_limits: Optional[Mapping[str, Any]] = None) -> Limits:
    """Field-by-field lookup: global configuration first, then the defaults."""
    defaults = DEFAULT_PLAN_LIMITS.get(plan_key) or DEFAULT_PLAN_LIMITS[FALLBACK_PAID_PLAN_KEY]
    configured = (plan_limits or {}).get(plan_key) or {}

    max_daily = configured.get("max_daily")
    cooldown = configured.get("cooldown_minutes")
    return Limits(
        max_daily=int(max_daily) if max_daily is not None else defaults["max_daily"],
        cooldown_minutes=int(cooldown) if cooldown is not None else defaults["cooldown_minutes"],
    )


def resolve_limits(account: UserAccount, plan_limits: Optional[Mapping[str, Any]] = None) -> Limits:
    """
    Resolve (max_daily, cooldown_minutes) for an account

    Priority:
    1. custom_daily_limit on the account -> (custom_daily_limit, 0)
    2. paid account -> its plan if known, otherwise basic
    3. trial account -> trial

    Never fails; missing configuration falls back to DEFAULT_PLAN_LIMITS.
    """
    if account.custom_daily_limit is not None:
        return Limits(max_daily=account.custom_daily_limit, cooldown_minutes=0)
    return limits_for_plan(resolve_plan_key(account, plan_limits), plan_limits)


def effective_plan_limits(plan_limits: Optional[Mapping[str, Any]] = None) -> Dict[str, Dict[str, int]]:
    """Every known plan key with its resolved limits."""
    return {
        key: limits_for_plan(key, plan_limits)._asdict()
        for key in sorted(_known_plan_keys(plan_limits))
    }
