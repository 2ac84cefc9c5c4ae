"""User Account Domain Entity

One record per identity. Holds the spendable points balance, the plan the
user is on and the counters used for daily-limit and cooldown enforcement.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, Integer, String
from src.domain.base import BaseModel, UTCDateTime, utc_now


class AccountType(str, Enum):
    """Account types"""
    TRIAL = "trial"
    PAID = "paid"


class PlanType(str, Enum):
    """Subscription plan tiers (meaningful only for paid accounts)"""
    NONE = "none"
    BASIC = "basic"
    PRO = "pro"
    ELITE = "elite"
    E_COMMERCE = "e-commerce"


class UserAccount(BaseModel, table=True):
    """
    User Account - Points wallet and usage counters

    Domain Rules:
    - Balance is only driven negative by unchecked admin adjustments, never by deduct
    - daily_usage_count is valid only while last_reset_date is today (UTC);
      a stale date means the counter is implicitly zero
    - custom_daily_limit, when set, overrides the plan limit and removes cooldown
    - version increases on every mutation (compare-and-swap token)
    """

    __tablename__ = "user_accounts"
    __table_args__ = (
        CheckConstraint('daily_usage_count >= 0', name='daily_usage_count_non_negative'),
        CheckConstraint(
            'custom_daily_limit IS NULL OR custom_daily_limit >= 0',
            name='custom_daily_limit_non_negative',
        ),
    )

    id: str = Field(
        sa_column=Column(String(128), primary_key=True),
        description="Identity-provider user id"
    )

    email: Optional[str] = Field(
        default=None,
        index=True,
        description="Email address supplied at first login"
    )

    display_name: Optional[str] = Field(
        default=None,
        description="Display name supplied at first login"
    )

    balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Spendable points"
    )

    account_type: AccountType = Field(
        default=AccountType.TRIAL,
        description="trial or paid"
    )

    plan_type: PlanType = Field(
        default=PlanType.NONE,
        description="Plan tier for paid accounts"
    )

    plan_start_date: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))
    plan_end_date: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))

    custom_daily_limit: Optional[int] = Field(
        default=None,
        description="Per-user daily limit override (disables cooldown)"
    )

    daily_usage_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Usage units consumed on last_reset_date"
    )

    last_reset_date: Optional[date] = Field(
        default=None,
        description="UTC calendar day daily_usage_count belongs to"
    )

    last_usage_time: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UTCDateTime(), nullable=True),
        description="Time of the last quota-consuming deduction"
    )

    is_disabled: bool = Field(default=False)
    is_admin: bool = Field(default=False)

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency token"
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False))
    last_login: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))

    @property
    def is_paid(self) -> bool:
        return self.account_type == AccountType.PAID
