"""Pydantic schemas for payback plans, paybacks and schedule previews."""

from datetime import date, datetime
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

from app.core.enums import (
    DistributionPriority,
    PaybackFrequency,
    PaybackPlanStatus,
    PaybackStatus,
    PaymentMethod,
)


def check_paydays(frequency: Optional[PaybackFrequency], payday_list: Optional[List[int]]):
    """Validate payday values against the frequency they are used with."""
    if frequency is None or payday_list is None:
        return

    if not payday_list:
        raise ValueError("payday_list cannot be empty")

    if frequency == PaybackFrequency.MONTHLY:
        if len(payday_list) != 1:
            raise ValueError("MONTHLY plans take exactly one day of month")
        if not 1 <= payday_list[0] <= 31:
            raise ValueError("MONTHLY payday must be a day of month between 1 and 31")
        return

    if any(not 0 <= day <= 6 for day in payday_list):
        raise ValueError("Weekday paydays must be between 0 (Sunday) and 6 (Saturday)")
    if len(set(payday_list)) != len(payday_list):
        raise ValueError("payday_list cannot repeat a weekday")
    if frequency == PaybackFrequency.WEEKLY and len(payday_list) != 1:
        raise ValueError("WEEKLY plans take exactly one weekday")


# ==================== Schedule Schemas ====================


class PaybackScheduleRequest(BaseModel):
    """Terms of an unsaved plan to preview its payback list."""

    frequency: PaybackFrequency
    payday_list: List[int] = Field(..., min_length=1)
    avoid_holiday: bool = False
    start_date: date
    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    payback_count: int = Field(..., gt=0)
    next_payback_amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)

    @field_validator("payday_list")
    @classmethod
    def sort_paydays(cls, v: List[int]) -> List[int]:
        """Keep paydays in ascending order."""
        return sorted(v)

    @model_validator(mode="after")
    def validate_paydays(self) -> "PaybackScheduleRequest":
        """Ensure paydays fit the frequency."""
        check_paydays(self.frequency, self.payday_list)
        return self


class ScheduledPaybackResponse(BaseModel):
    """One previewed payback."""

    date: date
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class PaybackScheduleResponse(BaseModel):
    """Previewed payback list with plan length figures."""

    paybacks: List[ScheduledPaybackResponse]
    total_amount: Decimal
    payback_count: int
    term_length: Optional[Decimal] = None
    scheduled_end_date: Optional[date] = None


# ==================== Payback Plan Schemas ====================


class PaybackPlanBase(BaseModel):
    """Base schema for payback plan with common fields."""

    frequency: PaybackFrequency
    payday_list: List[int] = Field(..., min_length=1)
    avoid_holiday: bool = False
    start_date: date
    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    payback_count: int = Field(..., gt=0)
    payment_method: Optional[PaymentMethod] = None
    distribution_priority: DistributionPriority = DistributionPriority.FUND
    note: Optional[str] = None

    @field_validator("payday_list")
    @classmethod
    def sort_paydays(cls, v: List[int]) -> List[int]:
        """Keep paydays in ascending order."""
        return sorted(v)

    @model_validator(mode="after")
    def validate_paydays(self) -> "PaybackPlanBase":
        """Ensure paydays fit the frequency."""
        check_paydays(self.frequency, self.payday_list)
        return self


class PaybackPlanCreate(PaybackPlanBase):
    """Schema for creating a payback plan on a funding."""

    funding_id: UUID


class PaybackPlanUpdate(BaseModel):
    """Schema for updating a payback plan (all fields optional)."""

    frequency: Optional[PaybackFrequency] = None
    payday_list: Optional[List[int]] = Field(None, min_length=1)
    avoid_holiday: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    next_payback_date: Optional[date] = None
    total_amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    payback_count: Optional[int] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    distribution_priority: Optional[DistributionPriority] = None
    note: Optional[str] = None
    status: Optional[PaybackPlanStatus] = None

    @field_validator("payday_list")
    @classmethod
    def sort_paydays(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        """Keep paydays in ascending order if provided."""
        return sorted(v) if v is not None else v

    @field_validator(
        "frequency",
        "payday_list",
        "avoid_holiday",
        "start_date",
        "total_amount",
        "distribution_priority",
        "status",
    )
    @classmethod
    def reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        """Required plan fields may be omitted but not cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PaybackPlanResponse(BaseModel):
    """Schema for payback plan response."""

    id: UUID
    frequency: Optional[PaybackFrequency] = None
    payday_list: List[int]
    avoid_holiday: bool
    start_date: date
    total_amount: Decimal
    payback_count: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    distribution_priority: DistributionPriority
    note: Optional[str] = None
    funding_id: UUID
    merchant_id: UUID
    funder_id: UUID
    lender_id: Optional[UUID] = None
    end_date: Optional[date] = None
    next_payback_date: Optional[date] = None
    status: PaybackPlanStatus
    created_at: datetime
    updated_at: datetime
    statistics: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)


# ==================== Payback Schemas ====================


class PaybackResponse(BaseModel):
    """Schema for payback response."""

    id: UUID
    funding_id: UUID
    payback_plan_id: Optional[UUID] = None
    due_date: date
    submitted_date: Optional[date] = None
    payback_amount: Decimal
    funded_amount: Decimal
    fee_amount: Decimal
    payment_method: Optional[PaymentMethod] = None
    status: PaybackStatus
    note: Optional[str] = None
    reconciled: bool

    model_config = ConfigDict(from_attributes=True)
