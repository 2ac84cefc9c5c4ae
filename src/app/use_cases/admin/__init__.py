"""Admin use cases"""
from .adjust_balance import AdjustBalance
from .upgrade_to_plan import UpgradeToPlan
from .downgrade_to_trial import DowngradeToTrial
from .set_disabled import SetDisabled
from .set_custom_daily_limit import SetCustomDailyLimit
from .list_users import ListUsers
from .get_plan_limits import GetPlanLimits
from .update_plan_limits import UpdatePlanLimits
from .dtos import (
    AdjustBalanceCommandDTO,
    UpgradeToPlanCommandDTO,
    PlanChangeResponseDTO,
    ListUsersResponseDTO,
    PlanLimitEntryDTO,
    PlanLimitsDTO,
    UpdatePlanLimitsCommandDTO,
)

__all__ = [
    "AdjustBalance",
    "UpgradeToPlan",
    "DowngradeToTrial",
    "SetDisabled",
    "SetCustomDailyLimit",
    "ListUsers",
    "GetPlanLimits",
    "UpdatePlanLimits",
    "AdjustBalanceCommandDTO",
    "UpgradeToPlanCommandDTO",
    "PlanChangeResponseDTO",
    "ListUsersResponseDTO",
    "PlanLimitEntryDTO",
    "PlanLimitsDTO",
    "UpdatePlanLimitsCommandDTO",
]
