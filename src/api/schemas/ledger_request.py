"""Request schemas for Ledger API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class DeductRequestSchema(BaseModel):
    """
    Request schema for deducting points

    Used for POST /ledger/deduct endpoint.
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="User identifier (required, non-empty)"
    )

    amount: int = Field(
        ...,
        ge=0,
        description="Points to deduct (must be >= 0)"
    )

    description: str = Field(
        ...,
        min_length=1,
        description="Reason shown in the transaction history"
    )

    related_order_id: Optional[str] = Field(
        default=None,
        description="Order this charge belongs to"
    )

    usage_delta: int = Field(
        default=1,
        ge=0,
        description="Daily-quota units consumed (0 for charges that do not count)"
    )

    @field_validator("user_id", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "uid_8f2c",
                "amount": 30,
                "description": "Generate Ad Creative",
                "related_order_id": "order_123",
                "usage_delta": 1
            }
        }


class RefundRequestSchema(BaseModel):
    """
    Request schema for refunding points

    Used for POST /ledger/refund endpoint after a generation failed.
    """

    user_id: str = Field(..., min_length=1)

    amount: int = Field(
        ...,
        ge=0,
        description="Points to return (must be >= 0)"
    )

    description: str = Field(
        ...,
        min_length=1,
        description="Reason, e.g. 'Refund: Quick Edit Failed'"
    )

    related_order_id: Optional[str] = None

    usage_restore_count: int = Field(
        default=1,
        ge=0,
        description="Daily-quota units to give back"
    )


class InitializeAccountRequestSchema(BaseModel):
    """Request schema for POST /accounts (called after each successful login)"""

    user_id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    display_name: Optional[str] = None
