"""
Unit tests for the statistics calculators.

Calculators are pure, so rows are stood in for by simple namespaces.
"""
import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.core.enums import (
    IntentStatus,
    PaybackFrequency,
    PaybackPlanStatus,
    PaybackStatus,
    StipulationStatus,
    SyndicationOfferStatus,
    SyndicationStatus,
    TransferStatus,
)
from app.services.schedule import PaybackScheduleEngine
from app.services.statistics import PaybackPlanStatistics
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

D = Decimal
FOUR_PLACES = D("0.0001")


def row(**fields) -> SimpleNamespace:
    fields.setdefault("inactive", False)
    return SimpleNamespace(**fields)


def payback(status: PaybackStatus, amount: str = "100", funded: str = "0", fee: str = "0"):
    return row(
        status=status,
        payback_amount=D(amount),
        funded_amount=D(funded),
        fee_amount=D(fee),
    )


@pytest.fixture
def plan() -> SimpleNamespace:
    """Ten weekday paybacks collecting 1,000 from 2024-06-17."""
    return row(
        id=uuid.uuid4(),
        frequency=PaybackFrequency.DAILY,
        payday_list=[1, 2, 3, 4, 5],
        avoid_holiday=True,
        start_date=date(2024, 6, 17),
        total_amount=D("1000.00"),
        payback_count=10,
        next_payback_date=date(2024, 6, 20),
        status=PaybackPlanStatus.ACTIVE,
    )


class TestPaybackPlanCalculator:
    """Test suite for PaybackPlanCalculator."""

    def test_rollup(self, schedule_engine: PaybackScheduleEngine, plan: SimpleNamespace) -> None:
        """Status buckets, balances and dates of a running plan."""
        paybacks = [
            payback(PaybackStatus.SUCCEED),
            payback(PaybackStatus.SUCCEED),
            payback(PaybackStatus.SUBMITTED),
            payback(PaybackStatus.BOUNCED),
            payback(PaybackStatus.FAILED),
        ]

        stats = PaybackPlanCalculator(schedule_engine).calculate(plan, paybacks)

        assert (stats.succeed_count, stats.succeed_amount) == (2, D("200"))
        assert (stats.submitted_count, stats.submitted_amount) == (1, D("100"))
        assert (stats.bounced_count, stats.failed_count, stats.processing_count) == (1, 1, 0)
        assert stats.paid_amount == D("200")
        assert stats.pending_amount == D("100")
        assert stats.pending_count == 1
        assert stats.remaining_balance == D("700")
        assert stats.remaining_count == 7
        assert stats.next_payback_amount == D("100.00")
        assert stats.succeed_rate.quantize(FOUR_PLACES) == D("0.6667")
        assert stats.term_length == D("0.5")
        assert stats.scheduled_end_date == date(2024, 7, 1)
        assert stats.expected_end_date == date(2024, 6, 28)

    def test_no_paybacks(self, schedule_engine: PaybackScheduleEngine, plan: SimpleNamespace) -> None:
        """A fresh plan owes its whole total over its whole count."""
        stats = PaybackPlanCalculator(schedule_engine).calculate(plan, [])

        assert stats.remaining_balance == D("1000.00")
        assert stats.remaining_count == 10
        assert stats.next_payback_amount == D("100.00")
        assert stats.succeed_rate == 0

    def test_completed_plan(self, schedule_engine: PaybackScheduleEngine, plan: SimpleNamespace) -> None:
        """Nothing remaining means a zero next payback."""
        plan.payback_count = 2
        plan.total_amount = D("200")

        stats = PaybackPlanCalculator(schedule_engine).calculate(
            plan, [payback(PaybackStatus.SUCCEED), payback(PaybackStatus.SUCCEED)]
        )

        assert stats.remaining_count == 0
        assert stats.remaining_balance == 0
        assert stats.next_payback_amount == D("0.00")
        assert stats.expected_end_date is None

    def test_to_dict(self, schedule_engine: PaybackScheduleEngine, plan: SimpleNamespace) -> None:
        """Results flatten to a plain dict."""
        data = PaybackPlanCalculator(schedule_engine).calculate(plan, []).to_dict()

        assert data["remaining_count"] == 10
        assert data["scheduled_end_date"] == date(2024, 7, 1)


class TestIntentCalculator:
    """Test suite for IntentCalculator."""

    def test_rollup(self) -> None:
        """Transfers roll up by status into paid, pending and remaining."""
        intent = row(amount=D("5000"))
        transfers = [
            row(status=TransferStatus.SUCCEED, amount=D("3000")),
            row(status=TransferStatus.PROCESSING, amount=D("1000")),
            row(status=TransferStatus.FAILED, amount=D("500")),
        ]

        stats = IntentCalculator().calculate(intent, transfers)

        assert stats.paid_amount == D("3000")
        assert stats.pending_amount == D("1000")
        assert stats.pending_count == 1
        assert (stats.failed_count, stats.failed_amount) == (1, D("500"))
        assert stats.remaining_balance == D("1000")


class TestFundingCalculator:
    """Test suite for FundingCalculator."""

    @pytest.fixture
    def funding(self) -> SimpleNamespace:
        return row(id=uuid.uuid4(), funded_amount=D("10000.00"), payback_amount=D("14000.00"))

    @pytest.fixture
    def related(self) -> dict:
        plan = row(
            id=uuid.uuid4(),
            status=PaybackPlanStatus.ACTIVE,
            total_amount=D("15000"),
            payback_count=30,
        )
        plan_stats = PaybackPlanStatistics(
            succeed_count=2,
            succeed_amount=D("1000"),
            submitted_count=1,
            submitted_amount=D("500"),
            bounced_count=1,
            bounced_amount=D("500"),
        )
        return dict(
            fees=[
                row(amount=D("500"), upfront=True),
                row(amount=D("1000"), upfront=False),
                row(amount=D("999"), upfront=False, inactive=True),
            ],
            expenses=[
                row(amount=D("800"), commission=True),
                row(amount=D("200"), commission=False),
            ],
            credits=[row(amount=D("100"))],
            disbursement_intents=[
                row(status=IntentStatus.SUCCEED, amount=D("9500")),
                row(status=IntentStatus.CANCELLED, amount=D("1000")),
            ],
            commission_intents=[row(status=IntentStatus.SCHEDULED, amount=D("800"))],
            payback_plans=[plan],
            plan_statistics={plan.id: plan_stats},
            syndication_offers=[
                row(status=SyndicationOfferStatus.SUBMITTED, participate_amount=D("2000")),
                row(status=SyndicationOfferStatus.ACCEPTED, participate_amount=D("3000")),
            ],
            syndications=[row(participate_amount=D("3000"))],
            paybacks=[
                payback(PaybackStatus.SUCCEED, "500", funded="450", fee="50"),
                payback(PaybackStatus.SUCCEED, "500", funded="450", fee="50"),
                payback(PaybackStatus.SUBMITTED, "500", funded="450", fee="50"),
                payback(PaybackStatus.BOUNCED, "500", funded="450", fee="50"),
            ],
            payouts=[
                row(payout_amount=D("300"), fee_amount=D("30")),
                row(payout_amount=D("999"), fee_amount=D("99"), inactive=True),
            ],
        )

    def test_collections(self, funding: SimpleNamespace, related: dict) -> None:
        """Adjustments, intents, plans, syndication and payouts are totalled."""
        stats = FundingCalculator().calculate(funding, **related)

        assert (stats.total_fee_count, stats.total_fee_amount) == (2, D("1500"))
        assert stats.upfront_fee_amount == D("500")
        assert stats.residual_fee_amount == D("1000")
        assert stats.total_expense_amount == D("1000")
        assert stats.commission_amount == D("800")
        assert stats.credit_amount == D("100")

        assert stats.disbursement_intent_count == 1
        assert stats.disbursement_paid_amount == D("9500")
        assert stats.disbursement_scheduled_amount == 0
        assert stats.commission_scheduled_amount == D("800")

        assert stats.payback_plan_count == 1
        assert stats.payback_plan_amount == D("15000")
        assert stats.payback_remaining_count == 30
        assert stats.payback_succeed_amount == D("1000")

        assert stats.syndication_offer_amount == D("5000")
        assert stats.pending_syndication_offer_amount == D("2000")
        assert stats.accepted_syndication_offer_count == 1
        assert stats.syndication_amount == D("3000")

        assert stats.payout_amount == D("300")
        assert stats.management_amount == D("30")

    def test_derived_position(self, funding: SimpleNamespace, related: dict) -> None:
        """Balances, rates and profit follow from the totals."""
        stats = FundingCalculator().calculate(funding, **related)

        assert stats.factor_rate == D("1.4")
        assert stats.paid_amount == D("1000")
        assert stats.pending_amount == D("500")
        assert stats.unscheduled_amount == D("-100")
        assert stats.remaining_balance == D("13400")
        assert stats.remaining_payback_amount == D("11950")
        assert stats.remaining_fee_amount == D("850")
        assert stats.syndication_percent == D("0.3")
        assert stats.succeed_rate.quantize(FOUR_PLACES) == D("0.6667")
        assert stats.net_amount == D("9500")
        assert stats.buy_rate == D("1.32")
        assert stats.disbursement_remaining_amount == 0
        assert stats.commission_unscheduled_amount == D("8700")
        assert stats.current_profit_amount == D("-8700")
        assert stats.expected_profit_amount == D("4400")

    def test_plan_without_statistics(self, funding: SimpleNamespace, related: dict) -> None:
        """A stopped plan with no statistics contributes nothing collected."""
        related["payback_plans"][0].status = PaybackPlanStatus.STOPPED
        related["plan_statistics"] = None

        stats = FundingCalculator().calculate(funding, **related)

        assert stats.payback_plan_count == 1
        assert stats.payback_plan_amount == 0

    def test_empty_funding(self, funding: SimpleNamespace) -> None:
        """A funding with nothing attached has zeroed statistics."""
        stats = FundingCalculator().calculate(funding)

        assert stats.remaining_balance == 0
        assert stats.expected_profit_amount == D("4000")
        assert stats.succeed_rate == 0


class TestSyndicationCalculators:
    """Test suite for offer, syndication and payout calculators."""

    @pytest.fixture
    def lists(self) -> dict:
        return dict(
            fee_list=[
                {"name": "Origination", "amount": "100", "upfront": True},
                {"name": "Servicing", "amount": 50, "upfront": False, "syndication": True},
            ],
            credit_list=[{"name": "Bonus", "amount": 20, "upfront": True}],
        )

    def test_offer(self, lists: dict) -> None:
        """Fee and credit totals, syndicated amount and rates."""
        offer = row(participate_amount=D("3000"), payback_amount=D("4200"), **lists)
        funding = row(funded_amount=D("10000"), payback_amount=D("14000"))

        stats = SyndicationOfferCalculator().calculate(offer, funding)

        assert stats.total_funded_amount == D("10000")
        assert stats.total_fee_amount == D("150")
        assert stats.upfront_fee_amount == D("100")
        assert stats.recurring_fee_amount == D("50")
        assert stats.upfront_credit_amount == D("20")
        assert stats.recurring_credit_amount == 0
        assert stats.syndicated_amount == D("3080")
        assert stats.factor_rate == D("1.4")
        assert stats.buy_rate.quantize(FOUR_PLACES) == D("1.3567")

    def test_offer_without_payback(self) -> None:
        """Rates stay zero while the payback amount is zero."""
        offer = row(participate_amount=D("3000"), payback_amount=D("0"), fee_list=[], credit_list=[])

        stats = SyndicationOfferCalculator().calculate(offer)

        assert stats.factor_rate == 0
        assert stats.buy_rate == 0
        assert stats.syndicated_amount == D("3000")

    def test_syndication_with_payouts(self, lists: dict) -> None:
        """Payouts split into pending and redeemed and reduce the balances."""
        syndication = row(participate_amount=D("3000"), payback_amount=D("4200"), **lists)
        payouts = [
            row(payout_amount=D("420"), fee_amount=D("5"), credit_amount=D("0"), pending=False),
            row(payout_amount=D("420"), fee_amount=D("5"), credit_amount=D("0"), pending=True),
            row(payout_amount=D("999"), fee_amount=D("0"), credit_amount=D("0"), pending=True, inactive=True),
        ]

        stats = SyndicationCalculator().calculate(syndication, payouts=payouts)

        assert stats.syndicated_fee_amount == D("50")
        assert stats.syndicated_credit_amount == 0
        assert stats.payout_count == 2
        assert stats.payout_amount == D("840")
        assert stats.redeemed_amount == D("415")
        assert stats.pending_amount == D("415")
        assert stats.remaining_fee_amount == D("40")
        assert stats.remaining_credit_amount == 0
        assert stats.remaining_payback_amount == D("3360")
        assert stats.remaining_balance == D("3320")

    def test_payout(self) -> None:
        """Available amount nets the fee and adds the credit."""
        payout = row(payout_amount=D("100"), fee_amount=D("10"), credit_amount=D("5"))

        assert PayoutCalculator().calculate(payout).available_amount == D("95")


class TestPartyCalculators:
    """Test suite for application and counterparty calculators."""

    def test_application_stipulations(self) -> None:
        """Verified and waived stipulations both count as checked."""
        stipulations = [row(status=status) for status in StipulationStatus]

        stats = ApplicationCalculator().calculate(row(), stipulations)

        assert stats.stipulation_count == 4
        assert (stats.requested_count, stats.received_count, stats.checked_count) == (1, 1, 2)

    def test_merchant(self) -> None:
        """Applications and fundings split by their flags; inactive rows are skipped."""
        applications = [
            row(request_amount=D("5000"), closed=False),
            row(request_amount=D("3000"), closed=True),
            row(request_amount=D("9999"), closed=False, inactive=True),
        ]
        fundings = [
            row(funded_amount=D("10000"), closed=True, warning=False, defaulted=False),
            row(funded_amount=D("5000"), closed=False, warning=True, defaulted=False),
            row(funded_amount=D("2000"), closed=False, warning=False, defaulted=True),
        ]

        stats = MerchantCalculator().calculate(row(), applications=applications, fundings=fundings)

        assert (stats.application_count, stats.application_request_amount) == (2, D("8000"))
        assert (stats.pending_application_count, stats.pending_application_request_amount) == (1, D("5000"))
        assert (stats.funding_count, stats.funding_amount) == (3, D("17000"))
        assert (stats.completed_funding_count, stats.completed_funding_amount) == (1, D("10000"))
        assert (stats.active_funding_count, stats.active_funding_amount) == (2, D("7000"))
        assert (stats.warning_funding_count, stats.warning_funding_amount) == (1, D("5000"))
        assert (stats.defaulted_funding_count, stats.defaulted_funding_amount) == (1, D("2000"))

    def test_funder(self) -> None:
        """Lenders, applications, fundings and syndications of a funder."""
        stats = FunderCalculator().calculate(
            row(),
            lenders=[row(), row(inactive=True)],
            applications=[row(closed=False), row(closed=True)],
            fundings=[row(), row()],
            syndication_offers=[
                row(status=SyndicationOfferStatus.SUBMITTED, participate_amount=D("1000")),
                row(status=SyndicationOfferStatus.ACCEPTED, participate_amount=D("2000")),
            ],
            syndications=[
                row(status=SyndicationStatus.ACTIVE, participate_amount=D("2000")),
                row(status=SyndicationStatus.CLOSED, participate_amount=D("1000")),
            ],
        )

        assert stats.lender_count == 1
        assert (stats.application_count, stats.pending_application_count) == (2, 1)
        assert stats.funding_count == 2
        assert stats.pending_syndication_offer_amount == D("1000")
        assert stats.syndication_count == 2
        assert (stats.active_syndication_count, stats.active_syndication_amount) == (1, D("2000"))
        assert stats.closed_syndication_count == 1

    def test_syndicator(self) -> None:
        """Expired offers count as cancelled."""
        offers = [
            row(status=SyndicationOfferStatus.SUBMITTED, participate_amount=D("1000")),
            row(status=SyndicationOfferStatus.ACCEPTED, participate_amount=D("2000")),
            row(status=SyndicationOfferStatus.DECLINED, participate_amount=D("500")),
            row(status=SyndicationOfferStatus.CANCELLED, participate_amount=D("300")),
            row(status=SyndicationOfferStatus.EXPIRED, participate_amount=D("200")),
        ]
        syndications = [
            row(status=SyndicationStatus.ACTIVE, participate_amount=D("2000")),
            row(status=SyndicationStatus.CLOSED, participate_amount=D("1000")),
        ]

        stats = SyndicatorCalculator().calculate(
            row(), syndication_offers=offers, syndications=syndications
        )

        assert (stats.syndication_offer_count, stats.syndication_offer_amount) == (5, D("4000"))
        assert stats.pending_syndication_offer_amount == D("1000")
        assert stats.accepted_syndication_offer_amount == D("2000")
        assert stats.declined_syndication_offer_amount == D("500")
        assert (stats.cancelled_syndication_offer_count, stats.cancelled_syndication_offer_amount) == (
            2,
            D("500"),
        )
        assert (stats.active_syndication_count, stats.closed_syndication_amount) == (1, D("1000"))
