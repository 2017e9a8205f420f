"""Pure statistics calculators, one per subject type."""

from app.services.statistics.calculators.funding import FundingCalculator
from app.services.statistics.calculators.intent import IntentCalculator
from app.services.statistics.calculators.party import (
    ApplicationCalculator,
    FunderCalculator,
    MerchantCalculator,
    SyndicatorCalculator,
)
from app.services.statistics.calculators.payback_plan import PaybackPlanCalculator
from app.services.statistics.calculators.syndication import (
    PayoutCalculator,
    SyndicationCalculator,
    SyndicationOfferCalculator,
)

__all__ = [
    "ApplicationCalculator",
    "FunderCalculator",
    "FundingCalculator",
    "IntentCalculator",
    "MerchantCalculator",
    "PaybackPlanCalculator",
    "PayoutCalculator",
    "SyndicationCalculator",
    "SyndicationOfferCalculator",
    "SyndicatorCalculator",
]
