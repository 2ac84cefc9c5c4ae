"""Usage window helpers

The daily counter is reset lazily: a counter whose date is not today (UTC)
reads as zero. There is no scheduled midnight job.
"""

import math
from datetime import date, datetime
from typing import Optional
from src.domain.base import as_utc
from src.domain.user_account import UserAccount


def today_utc(now: datetime) -> date:
    return as_utc(now).date()


def current_daily_count(account: UserAccount, today: date) -> int:
    if account.last_reset_date != today:
        return 0
    return account.daily_usage_count or 0


def cooldown_remaining_minutes(
    last_usage_time: Optional[datetime],
    cooldown_minutes: int,
    now: datetime,
) -> int:
    """
    Whole minutes left before the next quota-consuming action, rounded up.

    Zero when there is no cooldown, no previous usage, or the cooldown has
    fully elapsed (elapsed == cooldown counts as elapsed).
    """
    if cooldown_minutes <= 0 or last_usage_time is None:
        return 0

    elapsed_minutes = (as_utc(now) - as_utc(last_usage_time)).total_seconds() / 60
    if elapsed_minutes >= cooldown_minutes:
        return 0

    remaining = math.ceil(cooldown_minutes - elapsed_minutes)
    # last_usage_time in the future (clock skew) never extends the wait
    return min(max(remaining, 1), cooldown_minutes)
