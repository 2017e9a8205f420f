"""Pydantic schemas for service input validation and serialization."""

from app.models.schemas.funding import (
    FundingCreate,
    FundingCreditCreate,
    FundingExpenseCreate,
    FundingFeeCreate,
    FundingResponse,
    FundingUpdate,
)
from app.models.schemas.party import PartyResponse, PartyUpdate
from app.models.schemas.payback_plan import (
    PaybackPlanCreate,
    PaybackPlanResponse,
    PaybackPlanUpdate,
    PaybackResponse,
    PaybackScheduleRequest,
    PaybackScheduleResponse,
    ScheduledPaybackResponse,
)

__all__ = [
    "FundingCreate",
    "FundingCreditCreate",
    "FundingExpenseCreate",
    "FundingFeeCreate",
    "FundingResponse",
    "FundingUpdate",
    "PartyResponse",
    "PartyUpdate",
    "PaybackPlanCreate",
    "PaybackPlanResponse",
    "PaybackPlanUpdate",
    "PaybackResponse",
    "PaybackScheduleRequest",
    "PaybackScheduleResponse",
    "ScheduledPaybackResponse",
]
