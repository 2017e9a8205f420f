"""Funding statistics rolled up from every collection attached to a funding."""

from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from app.core.enums import (
    IntentStatus,
    PaybackPlanStatus,
    PaybackStatus,
    SyndicationOfferStatus,
)
from app.core.money import ZERO, to_decimal
from app.services.statistics.base import StatisticsCalculator
from app.services.statistics.results import FundingStatistics, PaybackPlanStatistics

# Intents counted as scheduled money; CANCELLED ones are ignored
SCHEDULED_INTENT_STATUSES = (
    IntentStatus.SCHEDULED,
    IntentStatus.SUBMITTED,
    IntentStatus.FAILED,
)

PENDING_PAYBACK_STATUSES = (PaybackStatus.SUBMITTED, PaybackStatus.PROCESSING)

OFFER_STATUS_FIELDS = {
    SyndicationOfferStatus.SUBMITTED: "pending",
    SyndicationOfferStatus.ACCEPTED: "accepted",
    SyndicationOfferStatus.DECLINED: "declined",
    SyndicationOfferStatus.CANCELLED: "cancelled",
    SyndicationOfferStatus.EXPIRED: "expired",
}

PLAN_STATUS_PREFIXES = ("submitted", "processing", "failed", "succeed", "bounced", "disputed")


class FundingCalculator(StatisticsCalculator):
    """
    Computes a funding's financial position.

    Inputs are the funding's fees, expenses, credits, intents, payback
    plans (with their own statistics), syndication offers, syndications,
    paybacks and payouts. Inactive rows are skipped.
    """

    def calculate(
        self,
        funding: Any,
        fees: Iterable[Any] = (),
        expenses: Iterable[Any] = (),
        credits: Iterable[Any] = (),
        disbursement_intents: Iterable[Any] = (),
        commission_intents: Iterable[Any] = (),
        payback_plans: Iterable[Any] = (),
        plan_statistics: Optional[Mapping[UUID, PaybackPlanStatistics]] = None,
        syndication_offers: Iterable[Any] = (),
        syndications: Iterable[Any] = (),
        paybacks: Iterable[Any] = (),
        payouts: Iterable[Any] = (),
    ) -> FundingStatistics:
        """
        Compute a funding's statistics.

        Args:
            funding: Funding row
            fees: FundingFee rows
            expenses: FundingExpense rows
            credits: FundingCredit rows
            disbursement_intents: DisbursementIntent rows
            commission_intents: CommissionIntent rows
            payback_plans: PaybackPlan rows
            plan_statistics: Statistics of each payback plan by plan ID
            syndication_offers: SyndicationOffer rows
            syndications: Syndication rows
            paybacks: Payback rows
            payouts: Payout rows

        Returns:
            FundingStatistics for the funding
        """
        stats = FundingStatistics()
        plan_statistics = plan_statistics or {}

        self._add_fees(stats, self._active(fees))
        self._add_expenses(stats, self._active(expenses))
        stats.credit_count, stats.credit_amount = self._total(self._active(credits))
        self._add_intents(stats, "disbursement", disbursement_intents)
        self._add_intents(stats, "commission", commission_intents)
        self._add_payback_plans(stats, payback_plans, plan_statistics)
        self._add_syndications(stats, self._active(syndication_offers), self._active(syndications))
        self._add_paybacks(stats, paybacks)

        payouts = self._active(payouts)
        _, stats.payout_amount = self._total(payouts, "payout_amount")
        _, stats.management_amount = self._total(payouts, "fee_amount")

        self._derive(stats, funding)
        return stats

    # ===== Collections =====

    def _add_fees(self, stats: FundingStatistics, fees: list):
        stats.total_fee_count, stats.total_fee_amount = self._total(fees)
        stats.upfront_fee_count, stats.upfront_fee_amount = self._total(
            fees, where=lambda fee: fee.upfront
        )
        stats.residual_fee_count, stats.residual_fee_amount = self._total(
            fees, where=lambda fee: not fee.upfront
        )

    def _add_expenses(self, stats: FundingStatistics, expenses: list):
        stats.total_expense_count, stats.total_expense_amount = self._total(expenses)
        stats.commission_count, stats.commission_amount = self._total(
            expenses, where=lambda expense: expense.commission
        )

    def _add_intents(self, stats: FundingStatistics, prefix: str, intents: Iterable[Any]):
        intent_count = 0
        succeed_count = 0
        paid_amount = ZERO
        scheduled_amount = ZERO

        for intent in intents:
            if intent.status == IntentStatus.SUCCEED:
                intent_count += 1
                succeed_count += 1
                paid_amount += self._amount(intent)
            elif intent.status in SCHEDULED_INTENT_STATUSES:
                intent_count += 1
                scheduled_amount += self._amount(intent)

        setattr(stats, f"{prefix}_intent_count", intent_count)
        setattr(stats, f"{prefix}_succeed_count", succeed_count)
        setattr(stats, f"{prefix}_paid_amount", paid_amount)
        setattr(stats, f"{prefix}_scheduled_amount", scheduled_amount)

    def _add_payback_plans(
        self,
        stats: FundingStatistics,
        plans: Iterable[Any],
        plan_statistics: Mapping[UUID, PaybackPlanStatistics],
    ):
        for plan in plans:
            plan_stats = plan_statistics.get(plan.id) or PaybackPlanStatistics()
            stats.payback_plan_count += 1
            stats.payback_remaining_count += plan.payback_count or 0

            for prefix in PLAN_STATUS_PREFIXES:
                count_field = f"payback_{prefix}_count"
                amount_field = f"payback_{prefix}_amount"
                setattr(stats, count_field, getattr(stats, count_field) + getattr(plan_stats, f"{prefix}_count"))
                setattr(stats, amount_field, getattr(stats, amount_field) + getattr(plan_stats, f"{prefix}_amount"))

            # A running plan commits its whole total; others only what was collected
            if plan.status == PaybackPlanStatus.ACTIVE:
                stats.payback_plan_amount += to_decimal(plan.total_amount)
            else:
                stats.payback_plan_amount += (
                    plan_stats.succeed_amount
                    + plan_stats.submitted_amount
                    + plan_stats.processing_amount
                )

    def _add_syndications(self, stats: FundingStatistics, offers: list, syndications: list):
        stats.syndication_offer_count, stats.syndication_offer_amount = self._total(
            offers, "participate_amount"
        )
        for status, prefix in OFFER_STATUS_FIELDS.items():
            count, amount = self._total(
                offers, "participate_amount", where=lambda offer: offer.status == status
            )
            setattr(stats, f"{prefix}_syndication_offer_count", count)
            setattr(stats, f"{prefix}_syndication_offer_amount", amount)

        stats.syndication_count, stats.syndication_amount = self._total(
            syndications, "participate_amount"
        )

    def _add_paybacks(self, stats: FundingStatistics, paybacks: Iterable[Any]):
        for payback in paybacks:
            if payback.status == PaybackStatus.SUCCEED:
                stats.paid_payback_funded_amount += self._amount(payback, "funded_amount")
                stats.paid_payback_fee_amount += self._amount(payback, "fee_amount")
            elif payback.status in PENDING_PAYBACK_STATUSES:
                stats.pending_payback_funded_amount += self._amount(payback, "funded_amount")
                stats.pending_payback_fee_amount += self._amount(payback, "fee_amount")

    # ===== Derived fields =====

    def _derive(self, stats: FundingStatistics, funding: Any):
        funded_amount = to_decimal(funding.funded_amount)
        payback_amount = to_decimal(funding.payback_amount)

        stats.factor_rate = self._ratio(payback_amount, funded_amount)

        stats.paid_amount = stats.payback_succeed_amount
        stats.pending_amount = stats.payback_submitted_amount + stats.payback_processing_amount
        stats.pending_count = stats.payback_submitted_count + stats.payback_processing_count

        # Balance owed on money actually disbursed, plus residual fees, less credits
        owed = (
            (stats.disbursement_paid_amount + stats.upfront_fee_amount) * stats.factor_rate
            + stats.residual_fee_amount
            - stats.credit_amount
        )
        stats.unscheduled_amount = owed - stats.payback_plan_amount
        stats.remaining_balance = owed - stats.paid_amount - stats.pending_amount

        stats.remaining_payback_amount = (
            stats.disbursement_paid_amount * stats.factor_rate
            - stats.paid_payback_funded_amount
            - stats.pending_payback_funded_amount
        )
        stats.remaining_fee_amount = (
            stats.residual_fee_amount
            - stats.paid_payback_fee_amount
            - stats.pending_payback_fee_amount
        )

        stats.syndication_percent = self._ratio(stats.syndication_amount, funded_amount)

        completed = (
            stats.payback_succeed_count
            + stats.payback_bounced_count
            + stats.payback_disputed_count
        )
        stats.succeed_rate = self._ratio(stats.payback_succeed_count, completed)

        stats.net_amount = funded_amount - stats.upfront_fee_amount
        stats.buy_rate = self._ratio(payback_amount - stats.commission_amount, funded_amount)

        stats.disbursement_unscheduled_amount = stats.net_amount - stats.disbursement_scheduled_amount
        stats.disbursement_remaining_amount = stats.net_amount - stats.disbursement_paid_amount
        stats.commission_unscheduled_amount = stats.net_amount - stats.commission_scheduled_amount
        stats.commission_remaining_amount = stats.net_amount - stats.commission_paid_amount

        stats.current_profit_amount = (
            stats.paid_amount
            - stats.disbursement_paid_amount
            - stats.total_expense_amount
            + stats.commission_amount
            - stats.commission_paid_amount
        )
        stats.expected_profit_amount = (
            payback_amount
            + stats.total_fee_amount
            - funded_amount
            - stats.total_expense_amount
            - stats.credit_amount
        )
