"""Data Transfer Objects for Admin Use Cases"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.user_account import PlanType
from src.app.use_cases.ledger.dtos import AccountResponseDTO


class AdjustBalanceCommandDTO(BaseModel):
    """
    Command DTO for a manual balance adjustment

    Positive delta credits, negative delta debits. No balance check is made.
    """

    user_id: str = Field(..., description="Account to adjust")
    delta: int = Field(..., description="Signed change to apply to the balance")
    reason: str = Field(..., min_length=1, description="Why the adjustment was made")
    performed_by: Optional[str] = Field(default=None, description="Acting admin user id")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "uid_8f2c",
                "delta": 250,
                "reason": "Compensation for outage",
                "performed_by": "uid_admin"
            }
        }


class UpgradeToPlanCommandDTO(BaseModel):
    """Command DTO for moving an account onto a paid plan"""

    user_id: str = Field(..., description="Account to upgrade")
    plan: PlanType = Field(..., description="Target plan (not 'none')")
    reason: str = Field(..., min_length=1, description="Purchase reference or note")
    points: Optional[int] = Field(
        default=None,
        ge=0,
        description="Points to credit (defaults to the plan allotment)"
    )
    performed_by: Optional[str] = Field(default=None, description="Acting admin user id")


class PlanChangeResponseDTO(BaseModel):
    account: AccountResponseDTO
    points_credited: int = Field(..., description="Points added by the change")
    transaction_id: Optional[int] = Field(
        default=None,
        description="Credit transaction (None when nothing was credited)"
    )


class PlanLimitEntryDTO(BaseModel):
    max_daily: int = Field(..., ge=0, description="Usage units allowed per UTC day")
    cooldown_minutes: int = Field(..., ge=0, description="Minimum minutes between usages")


class PlanLimitsDTO(BaseModel):
    """Effective plan limits keyed by plan (defaults merged in)"""

    limits: Dict[str, PlanLimitEntryDTO]
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last time the stored limits were replaced (None = defaults only)"
    )


class UpdatePlanLimitsCommandDTO(BaseModel):
    limits: Dict[str, PlanLimitEntryDTO] = Field(..., min_length=1)
    performed_by: Optional[str] = None


class ListUsersResponseDTO(BaseModel):
    """Accounts for the admin dashboard, newest first"""

    users: List[AccountResponseDTO]
    total: int
    limit: int
    offset: int
