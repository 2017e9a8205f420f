"""Disbursement and commission intent statistics."""

from typing import Any, Iterable

from app.core.enums import TransferStatus
from app.core.money import to_decimal
from app.services.statistics.base import StatisticsCalculator
from app.services.statistics.results import IntentStatistics

TRANSFER_STATUS_FIELDS = {
    TransferStatus.SUBMITTED: "submitted",
    TransferStatus.PROCESSING: "processing",
    TransferStatus.SUCCEED: "succeed",
    TransferStatus.FAILED: "failed",
}


class IntentCalculator(StatisticsCalculator):
    """Rolls up the transfers executed against an intent."""

    def calculate(self, intent: Any, transfers: Iterable[Any] = ()) -> IntentStatistics:
        """
        Compute an intent's statistics.

        Args:
            intent: DisbursementIntent or CommissionIntent row
            transfers: Disbursements or commissions executed against it

        Returns:
            IntentStatistics for the intent
        """
        transfers = list(transfers)
        stats = IntentStatistics()

        for status, prefix in TRANSFER_STATUS_FIELDS.items():
            count, amount = self._total(transfers, where=lambda t: t.status == status)
            setattr(stats, f"{prefix}_count", count)
            setattr(stats, f"{prefix}_amount", amount)

        stats.paid_amount = stats.succeed_amount
        stats.pending_amount = stats.submitted_amount + stats.processing_amount
        stats.pending_count = stats.submitted_count + stats.processing_count
        stats.remaining_balance = (
            to_decimal(intent.amount) - stats.paid_amount - stats.pending_amount
        )
        return stats
