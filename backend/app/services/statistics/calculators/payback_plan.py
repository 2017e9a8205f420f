"""Payback plan statistics."""

from typing import Any, Iterable, Optional

from app.core.enums import PaybackStatus
from app.core.money import ZERO, round_cents, to_decimal
from app.services.schedule import PaybackScheduleEngine, PaybackTerms
from app.services.statistics.base import StatisticsCalculator
from app.services.statistics.results import PaybackPlanStatistics

PAYBACK_STATUS_FIELDS = {
    PaybackStatus.SUBMITTED: "submitted",
    PaybackStatus.PROCESSING: "processing",
    PaybackStatus.FAILED: "failed",
    PaybackStatus.SUCCEED: "succeed",
    PaybackStatus.BOUNCED: "bounced",
    PaybackStatus.DISPUTED: "disputed",
}


class PaybackPlanCalculator(StatisticsCalculator):
    """
    Rolls up a plan's paybacks by status and derives its balance.

    Schedule-dependent fields (term length, end dates) come from the
    schedule engine fed with the plan's terms and its remaining count.
    """

    def __init__(self, schedule_engine: Optional[PaybackScheduleEngine] = None):
        self.schedule_engine = schedule_engine or PaybackScheduleEngine()

    def calculate(
        self, plan: Any, paybacks: Iterable[Any] = ()
    ) -> PaybackPlanStatistics:
        """
        Compute a payback plan's statistics.

        Args:
            plan: PaybackPlan row
            paybacks: Paybacks generated for the plan

        Returns:
            PaybackPlanStatistics for the plan
        """
        paybacks = list(paybacks)
        stats = PaybackPlanStatistics()

        for status, prefix in PAYBACK_STATUS_FIELDS.items():
            count, amount = self._total(
                paybacks, "payback_amount", where=lambda p: p.status == status
            )
            setattr(stats, f"{prefix}_count", count)
            setattr(stats, f"{prefix}_amount", amount)

        stats.paid_amount = stats.succeed_amount
        stats.pending_amount = stats.submitted_amount + stats.processing_amount
        stats.pending_count = stats.submitted_count + stats.processing_count

        stats.remaining_balance = (
            to_decimal(plan.total_amount) - stats.paid_amount - stats.pending_amount
        )
        stats.remaining_count = (
            (plan.payback_count or 0) - stats.succeed_count - stats.pending_count
        )

        completed = stats.succeed_count + stats.bounced_count + stats.disputed_count
        stats.succeed_rate = self._ratio(stats.succeed_count, completed)

        if stats.remaining_count > 0:
            stats.next_payback_amount = round_cents(
                stats.remaining_balance / stats.remaining_count
            )
        else:
            stats.next_payback_amount = ZERO

        terms = PaybackTerms.from_plan(
            plan,
            next_payback_amount=stats.next_payback_amount,
            remaining_count=stats.remaining_count,
        )
        stats.term_length = self.schedule_engine.term_length(terms)
        stats.scheduled_end_date = self.schedule_engine.scheduled_end_date(terms)
        stats.expected_end_date = self.schedule_engine.expected_end_date(terms)

        return stats
