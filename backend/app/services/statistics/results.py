"""Result containers of the statistics calculators."""

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from app.core.money import ZERO


@dataclass
class StatisticsResult:
    """Base class giving every result a plain dict view."""

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as a dict of field name to value."""
        return asdict(self)


@dataclass
class PaybackPlanStatistics(StatisticsResult):
    """Rollup of a payback plan's paybacks."""

    submitted_count: int = 0
    submitted_amount: Decimal = ZERO
    processing_count: int = 0
    processing_amount: Decimal = ZERO
    failed_count: int = 0
    failed_amount: Decimal = ZERO
    succeed_count: int = 0
    succeed_amount: Decimal = ZERO
    bounced_count: int = 0
    bounced_amount: Decimal = ZERO
    disputed_count: int = 0
    disputed_amount: Decimal = ZERO

    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    pending_count: int = 0
    remaining_balance: Decimal = ZERO
    remaining_count: int = 0
    succeed_rate: Decimal = Decimal("0")
    next_payback_amount: Decimal = ZERO

    term_length: Optional[Decimal] = None
    scheduled_end_date: Optional[date] = None
    expected_end_date: Optional[date] = None


@dataclass
class IntentStatistics(StatisticsResult):
    """Rollup of a disbursement or commission intent's transfers."""

    submitted_count: int = 0
    submitted_amount: Decimal = ZERO
    processing_count: int = 0
    processing_amount: Decimal = ZERO
    succeed_count: int = 0
    succeed_amount: Decimal = ZERO
    failed_count: int = 0
    failed_amount: Decimal = ZERO

    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    pending_count: int = 0
    remaining_balance: Decimal = ZERO


@dataclass
class FundingStatistics(StatisticsResult):
    """Rollup of everything attached to a funding."""

    factor_rate: Decimal = Decimal("0")

    # Fees
    upfront_fee_amount: Decimal = ZERO
    upfront_fee_count: int = 0
    residual_fee_amount: Decimal = ZERO
    residual_fee_count: int = 0
    total_fee_amount: Decimal = ZERO
    total_fee_count: int = 0

    # Expenses
    commission_amount: Decimal = ZERO
    commission_count: int = 0
    total_expense_amount: Decimal = ZERO
    total_expense_count: int = 0

    # Credits
    credit_amount: Decimal = ZERO
    credit_count: int = 0

    # Disbursements
    disbursement_intent_count: int = 0
    disbursement_succeed_count: int = 0
    disbursement_scheduled_amount: Decimal = ZERO
    disbursement_paid_amount: Decimal = ZERO

    # Commissions
    commission_intent_count: int = 0
    commission_succeed_count: int = 0
    commission_scheduled_amount: Decimal = ZERO
    commission_paid_amount: Decimal = ZERO

    # Payback plans
    payback_plan_count: int = 0
    payback_plan_amount: Decimal = ZERO
    payback_submitted_count: int = 0
    payback_submitted_amount: Decimal = ZERO
    payback_processing_count: int = 0
    payback_processing_amount: Decimal = ZERO
    payback_failed_count: int = 0
    payback_failed_amount: Decimal = ZERO
    payback_succeed_count: int = 0
    payback_succeed_amount: Decimal = ZERO
    payback_bounced_count: int = 0
    payback_bounced_amount: Decimal = ZERO
    payback_disputed_count: int = 0
    payback_disputed_amount: Decimal = ZERO
    payback_remaining_count: int = 0

    # Syndication offers
    syndication_offer_count: int = 0
    syndication_offer_amount: Decimal = ZERO
    pending_syndication_offer_count: int = 0
    pending_syndication_offer_amount: Decimal = ZERO
    accepted_syndication_offer_count: int = 0
    accepted_syndication_offer_amount: Decimal = ZERO
    declined_syndication_offer_count: int = 0
    declined_syndication_offer_amount: Decimal = ZERO
    cancelled_syndication_offer_count: int = 0
    cancelled_syndication_offer_amount: Decimal = ZERO
    expired_syndication_offer_count: int = 0
    expired_syndication_offer_amount: Decimal = ZERO

    # Syndications
    syndication_count: int = 0
    syndication_amount: Decimal = ZERO
    syndication_percent: Decimal = Decimal("0")

    # Payouts
    payout_amount: Decimal = ZERO
    management_amount: Decimal = ZERO

    # Payback portions
    paid_payback_funded_amount: Decimal = ZERO
    paid_payback_fee_amount: Decimal = ZERO
    pending_payback_funded_amount: Decimal = ZERO
    pending_payback_fee_amount: Decimal = ZERO

    # Derived
    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    pending_count: int = 0
    unscheduled_amount: Decimal = ZERO
    remaining_balance: Decimal = ZERO
    remaining_payback_amount: Decimal = ZERO
    remaining_fee_amount: Decimal = ZERO
    succeed_rate: Decimal = Decimal("0")
    net_amount: Decimal = ZERO
    buy_rate: Decimal = Decimal("0")
    disbursement_unscheduled_amount: Decimal = ZERO
    disbursement_remaining_amount: Decimal = ZERO
    commission_unscheduled_amount: Decimal = ZERO
    commission_remaining_amount: Decimal = ZERO
    current_profit_amount: Decimal = ZERO
    expected_profit_amount: Decimal = ZERO


@dataclass
class SyndicationOfferStatistics(StatisticsResult):
    """Derived amounts of a syndication offer."""

    total_funded_amount: Decimal = ZERO
    total_payback_amount: Decimal = ZERO

    total_fee_amount: Decimal = ZERO
    upfront_fee_amount: Decimal = ZERO
    recurring_fee_amount: Decimal = ZERO
    total_credit_amount: Decimal = ZERO
    upfront_credit_amount: Decimal = ZERO
    recurring_credit_amount: Decimal = ZERO

    syndicated_amount: Decimal = ZERO
    factor_rate: Decimal = Decimal("0")
    buy_rate: Decimal = Decimal("0")


@dataclass
class SyndicationStatistics(SyndicationOfferStatistics):
    """Derived amounts of a syndication, with its payout rollup."""

    syndicated_fee_amount: Decimal = ZERO
    syndicated_credit_amount: Decimal = ZERO

    payout_count: int = 0
    payout_amount: Decimal = ZERO
    payout_fee_amount: Decimal = ZERO
    payout_credit_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    redeemed_amount: Decimal = ZERO

    remaining_fee_amount: Decimal = ZERO
    remaining_credit_amount: Decimal = ZERO
    remaining_payback_amount: Decimal = ZERO
    remaining_balance: Decimal = ZERO


@dataclass
class PayoutStatistics(StatisticsResult):
    """Derived amount of a payout."""

    available_amount: Decimal = ZERO


@dataclass
class ApplicationStatistics(StatisticsResult):
    """Stipulation counts of an application."""

    stipulation_count: int = 0
    requested_count: int = 0
    received_count: int = 0
    checked_count: int = 0


@dataclass
class MerchantStatistics(StatisticsResult):
    """Application and funding rollup of a merchant."""

    application_count: int = 0
    application_request_amount: Decimal = ZERO
    pending_application_count: int = 0
    pending_application_request_amount: Decimal = ZERO

    funding_count: int = 0
    funding_amount: Decimal = ZERO
    active_funding_count: int = 0
    active_funding_amount: Decimal = ZERO
    completed_funding_count: int = 0
    completed_funding_amount: Decimal = ZERO
    warning_funding_count: int = 0
    warning_funding_amount: Decimal = ZERO
    defaulted_funding_count: int = 0
    defaulted_funding_amount: Decimal = ZERO


@dataclass
class FunderStatistics(StatisticsResult):
    """Portfolio rollup of a funder."""

    lender_count: int = 0
    application_count: int = 0
    pending_application_count: int = 0
    funding_count: int = 0
    pending_syndication_offer_amount: Decimal = ZERO
    syndication_count: int = 0
    active_syndication_count: int = 0
    active_syndication_amount: Decimal = ZERO
    closed_syndication_count: int = 0


@dataclass
class SyndicatorStatistics(StatisticsResult):
    """Offer and syndication rollup of a syndicator."""

    syndication_offer_count: int = 0
    syndication_offer_amount: Decimal = ZERO
    pending_syndication_offer_count: int = 0
    pending_syndication_offer_amount: Decimal = ZERO
    accepted_syndication_offer_count: int = 0
    accepted_syndication_offer_amount: Decimal = ZERO
    declined_syndication_offer_count: int = 0
    declined_syndication_offer_amount: Decimal = ZERO
    cancelled_syndication_offer_count: int = 0
    cancelled_syndication_offer_amount: Decimal = ZERO

    syndication_count: int = 0
    syndication_amount: Decimal = ZERO
    active_syndication_count: int = 0
    active_syndication_amount: Decimal = ZERO
    closed_syndication_count: int = 0
    closed_syndication_amount: Decimal = ZERO
