"""
Integration tests for the batch statistics engine.
"""
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import (
    ApplicationType,
    IntentStatus,
    PaybackFrequency,
    PaybackStatus,
    StipulationStatus,
    TransferStatus,
)
from app.models.domain import (
    Application,
    ApplicationStipulation,
    Commission,
    CommissionIntent,
    Disbursement,
    DisbursementIntent,
    Funding,
    Payback,
    PaybackPlan,
    Payout,
    Syndication,
    SyndicationOffer,
)
from app.services.schedule import PaybackScheduleEngine
from app.services.statistics import StatisticsEngine


@pytest_asyncio.fixture
async def portfolio(db: AsyncSession, funding: Funding, parties: dict[str, Any]) -> dict[str, Any]:
    """A disbursed funding with a running plan, a syndication and a payout."""
    syndicator = parties["syndicator"]

    intent = DisbursementIntent(
        funding_id=funding.id, amount=Decimal("10000"), status=IntentStatus.SUCCEED
    )
    cancelled = DisbursementIntent(
        funding_id=funding.id, amount=Decimal("500"), status=IntentStatus.CANCELLED
    )
    plan = PaybackPlan(
        funding_id=funding.id,
        merchant_id=funding.merchant_id,
        funder_id=funding.funder_id,
        frequency=PaybackFrequency.WEEKLY,
        payday_list=[5],
        start_date=date(2024, 6, 17),
        total_amount=Decimal("14000"),
        payback_count=10,
        next_payback_date=date(2024, 6, 28),
    )
    offer = SyndicationOffer(
        funding_id=funding.id,
        funder_id=funding.funder_id,
        syndicator_id=syndicator.id,
        participate_percent=Decimal("0.3"),
        participate_amount=Decimal("3000"),
        payback_amount=Decimal("4200"),
    )
    syndication = Syndication(
        funding_id=funding.id,
        funder_id=funding.funder_id,
        syndicator_id=syndicator.id,
        participate_percent=Decimal("0.3"),
        participate_amount=Decimal("3000"),
        payback_amount=Decimal("4200"),
    )
    db.add_all([intent, cancelled, plan, offer, syndication])
    await db.flush()

    payback = Payback(
        funding_id=funding.id,
        payback_plan_id=plan.id,
        merchant_id=funding.merchant_id,
        funder_id=funding.funder_id,
        due_date=date(2024, 6, 21),
        payback_amount=Decimal("1400"),
        funded_amount=Decimal("1400"),
        fee_amount=Decimal("0"),
        status=PaybackStatus.SUCCEED,
    )
    db.add(payback)
    await db.flush()

    payout_fields = dict(
        funding_id=funding.id,
        funder_id=funding.funder_id,
        syndicator_id=syndicator.id,
        syndication_id=syndication.id,
        payback_id=payback.id,
    )
    db.add_all(
        [
            Disbursement(
                disbursement_intent_id=intent.id,
                funding_id=funding.id,
                amount=Decimal("10000"),
                status=TransferStatus.SUCCEED,
            ),
            Payout(
                **payout_fields,
                payout_amount=Decimal("420"),
                fee_amount=Decimal("21"),
                pending=False,
            ),
            Payout(**payout_fields, payout_amount=Decimal("999"), inactive=True),
        ]
    )
    await db.commit()

    return {"intent": intent, "plan": plan, "offer": offer, "syndication": syndication}


@pytest.fixture
def engine(db: AsyncSession, schedule_engine: PaybackScheduleEngine) -> StatisticsEngine:
    return StatisticsEngine(db, schedule_engine)


class TestFundingStatistics:
    """Test suite for funding rollups."""

    @pytest.mark.asyncio
    async def test_funding_rollup(
        self, engine: StatisticsEngine, funding: Funding, portfolio: dict[str, Any]
    ) -> None:
        """Every attached collection feeds the funding's figures."""
        stats = (await engine.fundings([funding]))[funding.id]

        assert stats.factor_rate == Decimal("1.4")
        assert stats.disbursement_intent_count == 1
        assert stats.disbursement_paid_amount == Decimal("10000")
        assert stats.payback_plan_count == 1
        assert stats.payback_plan_amount == Decimal("14000")
        assert stats.paid_amount == Decimal("1400")
        assert stats.remaining_balance == Decimal("12600")
        assert stats.remaining_payback_amount == Decimal("12600")
        assert stats.syndication_offer_count == 1
        assert stats.syndication_amount == Decimal("3000")
        assert stats.syndication_percent == Decimal("0.3")
        assert stats.payout_amount == Decimal("420")
        assert stats.management_amount == Decimal("21")

    @pytest.mark.asyncio
    async def test_results_for_every_funding(
        self, db: AsyncSession, engine: StatisticsEngine, funding: Funding, portfolio: dict[str, Any]
    ) -> None:
        """Fundings without related rows still get a zeroed result."""
        bare = Funding(
            name="Second deal",
            funder_id=funding.funder_id,
            merchant_id=funding.merchant_id,
            funded_amount=Decimal("5000"),
            payback_amount=Decimal("6500"),
        )
        db.add(bare)
        await db.commit()

        results = await engine.fundings([funding, bare])

        assert set(results) == {funding.id, bare.id}
        assert results[bare.id].factor_rate == Decimal("1.3")
        assert results[bare.id].payback_plan_count == 0
        assert results[bare.id].paid_amount == Decimal("0")

    @pytest.mark.asyncio
    async def test_no_fundings(self, engine: StatisticsEngine) -> None:
        """No subjects means no queries and no results."""
        assert await engine.fundings([]) == {}


class TestScheduleStatistics:
    """Test suite for plan and intent rollups."""

    @pytest.mark.asyncio
    async def test_payback_plan(self, engine: StatisticsEngine, portfolio: dict[str, Any]) -> None:
        """The plan's paybacks drive its remaining count and next amount."""
        plan = portfolio["plan"]

        stats = (await engine.payback_plans([plan]))[plan.id]

        assert stats.succeed_count == 1
        assert stats.remaining_count == 9
        assert stats.remaining_balance == Decimal("12600")
        assert stats.next_payback_amount == Decimal("1400.00")
        assert stats.term_length == Decimal("2.5")

    @pytest.mark.asyncio
    async def test_disbursement_intent(self, engine: StatisticsEngine, portfolio: dict[str, Any]) -> None:
        """Succeeded transfers settle the intent."""
        intent = portfolio["intent"]

        stats = (await engine.disbursement_intents([intent]))[intent.id]

        assert stats.succeed_count == 1
        assert stats.paid_amount == Decimal("10000")
        assert stats.remaining_balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_commission_intent(
        self, db: AsyncSession, engine: StatisticsEngine, funding: Funding
    ) -> None:
        """Commissions load by their own intent and split into paid and pending."""
        intent = CommissionIntent(funding_id=funding.id, amount=Decimal("1000"))
        other = CommissionIntent(funding_id=funding.id, amount=Decimal("250"))
        db.add_all([intent, other])
        await db.flush()

        db.add_all(
            [
                Commission(
                    commission_intent_id=intent.id,
                    funding_id=funding.id,
                    amount=Decimal("400"),
                    status=TransferStatus.SUCCEED,
                ),
                Commission(
                    commission_intent_id=intent.id,
                    funding_id=funding.id,
                    amount=Decimal("100"),
                ),
                Commission(
                    commission_intent_id=intent.id,
                    funding_id=funding.id,
                    amount=Decimal("75"),
                    status=TransferStatus.FAILED,
                ),
                Commission(
                    commission_intent_id=other.id,
                    funding_id=funding.id,
                    amount=Decimal("250"),
                    status=TransferStatus.SUCCEED,
                ),
            ]
        )
        await db.commit()

        results = await engine.commission_intents([intent, other])

        stats = results[intent.id]
        assert stats.succeed_count == 1
        assert stats.paid_amount == Decimal("400")
        assert stats.pending_count == 1
        assert stats.pending_amount == Decimal("100")
        assert stats.failed_amount == Decimal("75")
        assert stats.remaining_balance == Decimal("500")
        assert results[other.id].remaining_balance == Decimal("0")


class TestSyndicationStatistics:
    """Test suite for syndication rollups."""

    @pytest.mark.asyncio
    async def test_syndication(self, engine: StatisticsEngine, portfolio: dict[str, Any]) -> None:
        """Inactive payouts are ignored; redeemed payouts reduce the remaining payback."""
        syndication = portfolio["syndication"]

        stats = (await engine.syndications([syndication]))[syndication.id]

        assert stats.total_funded_amount == Decimal("10000")
        assert stats.factor_rate == Decimal("1.4")
        assert stats.payout_count == 1
        assert stats.redeemed_amount == Decimal("399")
        assert stats.remaining_payback_amount == Decimal("3780")

    @pytest.mark.asyncio
    async def test_offer(self, engine: StatisticsEngine, portfolio: dict[str, Any]) -> None:
        """Offers pick up their funding's totals."""
        offer = portfolio["offer"]

        stats = (await engine.syndication_offers([offer]))[offer.id]

        assert stats.total_payback_amount == Decimal("14000")
        assert stats.syndicated_amount == Decimal("3000")

    @pytest.mark.asyncio
    async def test_syndicator(
        self, engine: StatisticsEngine, parties: dict[str, Any], portfolio: dict[str, Any]
    ) -> None:
        """A syndicator counts its offers and syndications."""
        syndicator = parties["syndicator"]

        stats = (await engine.syndicators([syndicator]))[syndicator.id]

        assert stats.syndication_offer_count == 1
        assert stats.syndication_count == 1
        assert stats.syndication_amount == Decimal("3000")


class TestPartyStatistics:
    """Test suite for application and counterparty rollups."""

    @pytest.mark.asyncio
    async def test_application(
        self, db: AsyncSession, engine: StatisticsEngine, parties: dict[str, Any]
    ) -> None:
        """Stipulations are counted by status."""
        application = Application(
            name="Joe's Pizza application",
            type=ApplicationType.NEW,
            merchant_id=parties["merchant"].id,
            funder_id=parties["funder"].id,
            request_amount=Decimal("10000"),
        )
        db.add(application)
        await db.flush()
        db.add_all(
            [
                ApplicationStipulation(
                    application_id=application.id,
                    name="Bank statements",
                    status=StipulationStatus.RECEIVED,
                ),
                ApplicationStipulation(
                    application_id=application.id,
                    name="Voided check",
                    status=StipulationStatus.REQUESTED,
                ),
            ]
        )
        await db.commit()

        stats = (await engine.applications([application]))[application.id]

        assert stats.stipulation_count == 2
        assert stats.requested_count == 1
        assert stats.received_count == 1

    @pytest.mark.asyncio
    async def test_merchant_and_funder(
        self, engine: StatisticsEngine, funding: Funding, parties: dict[str, Any]
    ) -> None:
        """Merchants and funders count their fundings; funders count their lenders."""
        merchant, funder = parties["merchant"], parties["funder"]

        merchant_stats = (await engine.merchants([merchant]))[merchant.id]
        funder_stats = (await engine.funders([funder]))[funder.id]

        assert merchant_stats.funding_count == 1
        assert merchant_stats.funding_amount == Decimal("10000")
        assert funder_stats.lender_count == 1
        assert funder_stats.funding_count == 1

    def test_payouts(self, engine: StatisticsEngine) -> None:
        """Payout figures need no loading."""
        payout = Payout(
            id=uuid4(),
            payout_amount=Decimal("100"), fee_amount=Decimal("5"), credit_amount=Decimal("2")
        )

        assert engine.payouts([payout])[payout.id].available_amount == Decimal("97")
