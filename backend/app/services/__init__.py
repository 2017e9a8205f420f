"""Service layer for business logic."""

from app.services.funding_service import FundingService
from app.services.party_service import PartyService
from app.services.payback_plan_service import PaybackPlanService

__all__ = ["FundingService", "PartyService", "PaybackPlanService"]
