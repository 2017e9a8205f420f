"""Pydantic schemas for fundings and their adjustments."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from app.core.enums import FundingType


# ==================== Adjustment Schemas ====================


class FundingFeeCreate(BaseModel):
    """Schema for a fee charged on a funding."""

    name: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    upfront: bool = False


class FundingExpenseCreate(BaseModel):
    """Schema for an expense of a funding."""

    name: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    commission: bool = False


class FundingCreditCreate(BaseModel):
    """Schema for a credit granted on a funding."""

    name: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(..., ge=0, decimal_places=2)


# ==================== Funding Schemas ====================


class FundingBase(BaseModel):
    """Base schema for funding with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    identifier: Optional[str] = Field(None, max_length=100)
    type: FundingType = FundingType.NEW
    funded_amount: Decimal = Field(..., gt=0, decimal_places=2)
    payback_amount: Decimal = Field(..., gt=0, decimal_places=2)
    position: Optional[int] = Field(None, ge=1)
    internal: bool = False

    @model_validator(mode="after")
    def validate_amounts(self) -> "FundingBase":
        """Ensure the merchant pays back at least what was funded."""
        if self.payback_amount < self.funded_amount:
            raise ValueError("payback_amount cannot be less than funded_amount")
        return self


class FundingCreate(FundingBase):
    """Schema for creating a funding with its adjustments."""

    funder_id: UUID
    merchant_id: UUID
    lender_id: Optional[UUID] = None
    application_id: Optional[UUID] = None
    fees: List[FundingFeeCreate] = Field(default_factory=list)
    expenses: List[FundingExpenseCreate] = Field(default_factory=list)
    credits: List[FundingCreditCreate] = Field(default_factory=list)


class FundingUpdate(BaseModel):
    """Schema for updating a funding (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    identifier: Optional[str] = Field(None, max_length=100)
    type: Optional[FundingType] = None
    funded_amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    payback_amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    position: Optional[int] = Field(None, ge=1)
    internal: Optional[bool] = None
    closed: Optional[bool] = None
    warning: Optional[bool] = None
    defaulted: Optional[bool] = None
    inactive: Optional[bool] = None

    @field_validator(
        "name",
        "type",
        "funded_amount",
        "payback_amount",
        "internal",
        "closed",
        "warning",
        "defaulted",
        "inactive",
    )
    @classmethod
    def reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        """Required funding fields may be omitted but not cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class FundingResponse(BaseModel):
    """Schema for funding response."""

    id: UUID
    name: str
    identifier: Optional[str] = None
    type: FundingType
    application_id: Optional[UUID] = None
    funder_id: UUID
    funder_name: Optional[str] = None
    lender_id: Optional[UUID] = None
    lender_name: Optional[str] = None
    merchant_id: UUID
    merchant_name: Optional[str] = None
    funded_amount: Decimal
    payback_amount: Decimal
    position: Optional[int] = None
    internal: bool
    closed: bool
    warning: bool
    defaulted: bool
    inactive: bool
    created_at: datetime
    updated_at: datetime
    statistics: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)
