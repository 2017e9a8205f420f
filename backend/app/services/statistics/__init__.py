"""Statistics rollup engine package."""

from app.services.statistics.engine import StatisticsEngine
from app.services.statistics.results import (
    ApplicationStatistics,
    FunderStatistics,
    FundingStatistics,
    IntentStatistics,
    MerchantStatistics,
    PaybackPlanStatistics,
    PayoutStatistics,
    SyndicationOfferStatistics,
    SyndicationStatistics,
    SyndicatorStatistics,
)

__all__ = [
    "StatisticsEngine",
    "ApplicationStatistics",
    "FunderStatistics",
    "FundingStatistics",
    "IntentStatistics",
    "MerchantStatistics",
    "PaybackPlanStatistics",
    "PayoutStatistics",
    "SyndicationOfferStatistics",
    "SyndicationStatistics",
    "SyndicatorStatistics",
]
