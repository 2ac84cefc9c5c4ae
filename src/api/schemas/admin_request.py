"""Request schemas for Admin API"""

from typing import Dict, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.admin.dtos import PlanLimitEntryDTO
from src.domain.user_account import PlanType


class AdjustBalanceRequestSchema(BaseModel):
    """
    Request schema for POST /admin/users/{user_id}/balance

    Positive delta credits the user, negative delta debits. The balance is not
    checked and may go negative.
    """

    delta: int = Field(..., description="Signed number of points")
    reason: str = Field(..., min_length=1, description="Shown in the transaction history")


class UpgradePlanRequestSchema(BaseModel):
    plan: PlanType = Field(..., description="basic, pro, elite or e-commerce")
    reason: str = Field(..., min_length=1, description="Purchase reference or note")
    points: Optional[int] = Field(
        default=None,
        ge=0,
        description="Override for the points credited (defaults to the plan allotment)"
    )


class SetDisabledRequestSchema(BaseModel):
    disabled: bool


class SetDailyLimitRequestSchema(BaseModel):
    limit: Optional[int] = Field(
        default=None,
        ge=0,
        description="Per-user daily limit; null clears the override"
    )


class UpdatePlanLimitsRequestSchema(BaseModel):
    limits: Dict[str, PlanLimitEntryDTO] = Field(
        ...,
        min_length=1,
        description="Plan key -> {max_daily, cooldown_minutes}"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "limits": {
                    "trial": {"max_daily": 2, "cooldown_minutes": 0},
                    "basic": {"max_daily": 20, "cooldown_minutes": 30},
                    "pro": {"max_daily": 50, "cooldown_minutes": 10}
                }
            }
        }
