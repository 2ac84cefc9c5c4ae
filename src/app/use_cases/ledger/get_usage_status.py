"""Get Usage Status Use Case

Read-only snapshot of the limits governing a user and how much of today's
quota is left, as shown on the usage card.
"""

from datetime import datetime
from typing import Callable
from libs.result import Result, Return
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.plan_limits_repository import PlanLimitsRepository
from src.domain.base import utc_now
from src.domain.errors import UserNotFoundError
from src.domain.plan_limits import resolve_limits, resolve_plan_key
from src.domain.usage_window import cooldown_remaining_minutes, current_daily_count, today_utc
from .dtos import UsageStatusResponseDTO
from .plan_limits_loader import load_plan_limits


class GetUsageStatus:
    def __init__(
        self,
        account_repo: UserAccountRepository,
        plan_limits_repo: PlanLimitsRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.account_repo = account_repo
        self.plan_limits_repo = plan_limits_repo
        self.clock = clock

    async def execute(self, user_id: str) -> Result[UsageStatusResponseDTO]:
        account = await self.account_repo.get_by_id(user_id)
        if not account:
            return Return.err(UserNotFoundError(user_id).to_error())

        now = self.clock()
        plan_limits = await load_plan_limits(self.plan_limits_repo)
        limits = resolve_limits(account, plan_limits)
        daily_used = current_daily_count(account, today_utc(now))

        return Return.ok(
            UsageStatusResponseDTO(
                user_id=account.id,
                plan_key=resolve_plan_key(account, plan_limits),
                balance=account.balance,
                max_daily=limits.max_daily,
                cooldown_minutes=limits.cooldown_minutes,
                custom_limit_applied=account.custom_daily_limit is not None,
                daily_used=daily_used,
                daily_remaining=max(0, limits.max_daily - daily_used),
                cooldown_remaining_minutes=cooldown_remaining_minutes(
                    account.last_usage_time, limits.cooldown_minutes, now
                ),
                last_reset_date=account.last_reset_date,
            )
        )
