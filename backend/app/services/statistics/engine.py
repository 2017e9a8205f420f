"""Statistics engine orchestrating batch loads and calculators."""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import BaseModel
from app.models.domain import (
    Application,
    ApplicationStipulation,
    Commission,
    CommissionIntent,
    Disbursement,
    DisbursementIntent,
    Funding,
    FundingCredit,
    FundingExpense,
    FundingFee,
    Lender,
    Payback,
    PaybackPlan,
    Payout,
    Syndication,
    SyndicationOffer,
)
from app.repositories.base import BaseRepository
from app.services.schedule import PaybackScheduleEngine
from app.services.statistics.calculators import (
    ApplicationCalculator,
    FunderCalculator,
    FundingCalculator,
    IntentCalculator,
    MerchantCalculator,
    PaybackPlanCalculator,
    PayoutCalculator,
    SyndicationCalculator,
    SyndicationOfferCalculator,
    SyndicatorCalculator,
)
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

logger = logging.getLogger(__name__)


def _group(rows: Iterable[Any], attr: str) -> Dict[Any, List[Any]]:
    grouped: Dict[Any, List[Any]] = defaultdict(list)
    for row in rows:
        grouped[getattr(row, attr)].append(row)
    return grouped


class StatisticsEngine:
    """
    Computes statistics for many subjects at once.

    This class:
    - Loads related rows with one IN query per related table
    - Excludes inactive rows for entities that carry the flag
    - Feeds each subject and its related rows to its calculator
    - Returns a result for every subject, zeroed when nothing is related
    """

    def __init__(
        self,
        db: AsyncSession,
        schedule_engine: Optional[PaybackScheduleEngine] = None,
    ):
        """
        Initialize the statistics engine.

        Args:
            db: Async database session
            schedule_engine: Engine for plan term length and end dates
        """
        self.db = db
        self.plan_calculator = PaybackPlanCalculator(schedule_engine)
        self.intent_calculator = IntentCalculator()
        self.funding_calculator = FundingCalculator()
        self.offer_calculator = SyndicationOfferCalculator()
        self.syndication_calculator = SyndicationCalculator()
        self.payout_calculator = PayoutCalculator()
        self.application_calculator = ApplicationCalculator()
        self.merchant_calculator = MerchantCalculator()
        self.funder_calculator = FunderCalculator()
        self.syndicator_calculator = SyndicatorCalculator()

    async def _load(
        self, model: Type[BaseModel], field: str, ids: Iterable[UUID]
    ) -> Dict[Any, List[Any]]:
        """Load rows of a related table for many subject IDs, grouped by that field."""
        rows = await BaseRepository(model, self.db).find_in(field, set(ids))
        return _group(rows, field)

    @staticmethod
    def _ids(subjects: Sequence[Any], attr: str = "id") -> List[UUID]:
        return [getattr(subject, attr) for subject in subjects if getattr(subject, attr) is not None]

    # ===== Payback plans and intents =====

    async def payback_plans(
        self, plans: Sequence[PaybackPlan]
    ) -> Dict[UUID, PaybackPlanStatistics]:
        """
        Compute statistics for payback plans.

        Args:
            plans: PaybackPlan rows

        Returns:
            Statistics keyed by plan ID
        """
        paybacks = await self._load(Payback, "payback_plan_id", self._ids(plans))
        return {
            plan.id: self.plan_calculator.calculate(plan, paybacks.get(plan.id, []))
            for plan in plans
        }

    async def disbursement_intents(
        self, intents: Sequence[DisbursementIntent]
    ) -> Dict[UUID, IntentStatistics]:
        """Compute statistics for disbursement intents, keyed by intent ID."""
        transfers = await self._load(Disbursement, "disbursement_intent_id", self._ids(intents))
        return {
            intent.id: self.intent_calculator.calculate(intent, transfers.get(intent.id, []))
            for intent in intents
        }

    async def commission_intents(
        self, intents: Sequence[CommissionIntent]
    ) -> Dict[UUID, IntentStatistics]:
        """Compute statistics for commission intents, keyed by intent ID."""
        transfers = await self._load(Commission, "commission_intent_id", self._ids(intents))
        return {
            intent.id: self.intent_calculator.calculate(intent, transfers.get(intent.id, []))
            for intent in intents
        }

    # ===== Fundings =====

    async def fundings(self, fundings: Sequence[Funding]) -> Dict[UUID, FundingStatistics]:
        """
        Compute statistics for fundings.

        Args:
            fundings: Funding rows

        Returns:
            Statistics keyed by funding ID
        """
        ids = self._ids(fundings)
        if not ids:
            return {}

        fees = await self._load(FundingFee, "funding_id", ids)
        expenses = await self._load(FundingExpense, "funding_id", ids)
        credits = await self._load(FundingCredit, "funding_id", ids)
        disbursement_intents = await self._load(DisbursementIntent, "funding_id", ids)
        commission_intents = await self._load(CommissionIntent, "funding_id", ids)
        plans = await self._load(PaybackPlan, "funding_id", ids)
        offers = await self._load(SyndicationOffer, "funding_id", ids)
        syndications = await self._load(Syndication, "funding_id", ids)
        paybacks = await self._load(Payback, "funding_id", ids)
        payouts = await self._load(Payout, "funding_id", ids)

        all_plans = [plan for group in plans.values() for plan in group]
        plan_statistics = await self.payback_plans(all_plans)

        results = {}
        for funding in fundings:
            results[funding.id] = self.funding_calculator.calculate(
                funding,
                fees=fees.get(funding.id, []),
                expenses=expenses.get(funding.id, []),
                credits=credits.get(funding.id, []),
                disbursement_intents=disbursement_intents.get(funding.id, []),
                commission_intents=commission_intents.get(funding.id, []),
                payback_plans=plans.get(funding.id, []),
                plan_statistics=plan_statistics,
                syndication_offers=offers.get(funding.id, []),
                syndications=syndications.get(funding.id, []),
                paybacks=paybacks.get(funding.id, []),
                payouts=payouts.get(funding.id, []),
            )

        logger.debug(f"Computed statistics for {len(results)} fundings")
        return results

    # ===== Syndication =====

    async def _fundings_by_id(self, subjects: Sequence[Any]) -> Dict[UUID, Funding]:
        rows = await BaseRepository(Funding, self.db).find_in(
            "id", set(self._ids(subjects, "funding_id")), exclude_inactive=False
        )
        return {funding.id: funding for funding in rows}

    async def syndication_offers(
        self, offers: Sequence[SyndicationOffer]
    ) -> Dict[UUID, SyndicationOfferStatistics]:
        """Compute statistics for syndication offers, keyed by offer ID."""
        fundings = await self._fundings_by_id(offers)
        return {
            offer.id: self.offer_calculator.calculate(offer, fundings.get(offer.funding_id))
            for offer in offers
        }

    async def syndications(
        self, syndications: Sequence[Syndication]
    ) -> Dict[UUID, SyndicationStatistics]:
        """Compute statistics for syndications, keyed by syndication ID."""
        fundings = await self._fundings_by_id(syndications)
        payouts = await self._load(Payout, "syndication_id", self._ids(syndications))
        return {
            syndication.id: self.syndication_calculator.calculate(
                syndication,
                funding=fundings.get(syndication.funding_id),
                payouts=payouts.get(syndication.id, []),
            )
            for syndication in syndications
        }

    def payouts(self, payouts: Sequence[Payout]) -> Dict[UUID, PayoutStatistics]:
        """Compute statistics for payouts, keyed by payout ID."""
        return {payout.id: self.payout_calculator.calculate(payout) for payout in payouts}

    # ===== Applications and counterparties =====

    async def applications(
        self, applications: Sequence[Application]
    ) -> Dict[UUID, ApplicationStatistics]:
        """Compute statistics for applications, keyed by application ID."""
        stipulations = await self._load(
            ApplicationStipulation, "application_id", self._ids(applications)
        )
        return {
            application.id: self.application_calculator.calculate(
                application, stipulations.get(application.id, [])
            )
            for application in applications
        }

    async def merchants(self, merchants: Sequence[Any]) -> Dict[UUID, MerchantStatistics]:
        """Compute statistics for merchants, keyed by merchant ID."""
        ids = self._ids(merchants)
        applications = await self._load(Application, "merchant_id", ids)
        fundings = await self._load(Funding, "merchant_id", ids)
        return {
            merchant.id: self.merchant_calculator.calculate(
                merchant,
                applications=applications.get(merchant.id, []),
                fundings=fundings.get(merchant.id, []),
            )
            for merchant in merchants
        }

    async def funders(self, funders: Sequence[Any]) -> Dict[UUID, FunderStatistics]:
        """Compute statistics for funders, keyed by funder ID."""
        ids = self._ids(funders)
        lenders = await self._load(Lender, "funder_id", ids)
        applications = await self._load(Application, "funder_id", ids)
        fundings = await self._load(Funding, "funder_id", ids)
        offers = await self._load(SyndicationOffer, "funder_id", ids)
        syndications = await self._load(Syndication, "funder_id", ids)
        return {
            funder.id: self.funder_calculator.calculate(
                funder,
                lenders=lenders.get(funder.id, []),
                applications=applications.get(funder.id, []),
                fundings=fundings.get(funder.id, []),
                syndication_offers=offers.get(funder.id, []),
                syndications=syndications.get(funder.id, []),
            )
            for funder in funders
        }

    async def syndicators(
        self, syndicators: Sequence[Any]
    ) -> Dict[UUID, SyndicatorStatistics]:
        """Compute statistics for syndicators, keyed by syndicator ID."""
        ids = self._ids(syndicators)
        offers = await self._load(SyndicationOffer, "syndicator_id", ids)
        syndications = await self._load(Syndication, "syndicator_id", ids)
        return {
            syndicator.id: self.syndicator_calculator.calculate(
                syndicator,
                syndication_offers=offers.get(syndicator.id, []),
                syndications=syndications.get(syndicator.id, []),
            )
            for syndicator in syndicators
        }
