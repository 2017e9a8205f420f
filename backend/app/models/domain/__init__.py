"""Domain models for the application."""

from app.models.domain.application import Application, ApplicationStipulation
from app.models.domain.funding import (
    Funding,
    FundingCredit,
    FundingExpense,
    FundingFee,
)
from app.models.domain.intent import (
    Commission,
    CommissionIntent,
    Disbursement,
    DisbursementIntent,
)
from app.models.domain.party import ISO, Funder, Lender, Merchant, Syndicator
from app.models.domain.payback import Payback, PaybackPlan
from app.models.domain.syndication import Payout, Syndication, SyndicationOffer

__all__ = [
    "Funder",
    "Lender",
    "Merchant",
    "ISO",
    "Syndicator",
    "Application",
    "ApplicationStipulation",
    "Funding",
    "FundingFee",
    "FundingExpense",
    "FundingCredit",
    "PaybackPlan",
    "Payback",
    "DisbursementIntent",
    "Disbursement",
    "CommissionIntent",
    "Commission",
    "SyndicationOffer",
    "Syndication",
    "Payout",
]
