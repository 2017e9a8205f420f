"""Syndication offer, syndication and payout statistics."""

from typing import Any, Iterable, Optional

from app.core.money import ZERO, to_decimal
from app.services.statistics.base import StatisticsCalculator
from app.services.statistics.results import (
    PayoutStatistics,
    SyndicationOfferStatistics,
    SyndicationStatistics,
)


class SyndicationOfferCalculator(StatisticsCalculator):
    """Derives fee, credit and rate figures from an offer's adjustment lists."""

    def calculate(
        self, offer: Any, funding: Optional[Any] = None
    ) -> SyndicationOfferStatistics:
        """
        Compute a syndication offer's statistics.

        Args:
            offer: SyndicationOffer row
            funding: The offer's funding, if loaded

        Returns:
            SyndicationOfferStatistics for the offer
        """
        stats = SyndicationOfferStatistics()
        self._fill(stats, offer, funding)
        return stats

    def _fill(self, stats: SyndicationOfferStatistics, subject: Any, funding: Optional[Any]):
        if funding is not None:
            stats.total_funded_amount = to_decimal(funding.funded_amount)
            stats.total_payback_amount = to_decimal(funding.payback_amount)

        stats.total_fee_amount = self._flagged_total(subject.fee_list)
        stats.total_credit_amount = self._flagged_total(subject.credit_list)
        stats.upfront_fee_amount = self._flagged_total(subject.fee_list, "upfront")
        stats.upfront_credit_amount = self._flagged_total(subject.credit_list, "upfront")
        stats.recurring_fee_amount = stats.total_fee_amount - stats.upfront_fee_amount
        stats.recurring_credit_amount = stats.total_credit_amount - stats.upfront_credit_amount

        participate_amount = to_decimal(subject.participate_amount)
        payback_amount = to_decimal(subject.payback_amount)
        stats.syndicated_amount = (
            participate_amount + stats.upfront_fee_amount - stats.upfront_credit_amount
        )

        if payback_amount > 0:
            stats.factor_rate = self._ratio(payback_amount, participate_amount)
            stats.buy_rate = self._ratio(
                payback_amount - stats.total_fee_amount + stats.total_credit_amount,
                participate_amount,
            )


class SyndicationCalculator(SyndicationOfferCalculator):
    """Offer figures plus the payout rollup and remaining balances."""

    def calculate(
        self,
        syndication: Any,
        funding: Optional[Any] = None,
        payouts: Iterable[Any] = (),
    ) -> SyndicationStatistics:
        """
        Compute a syndication's statistics.

        Args:
            syndication: Syndication row
            funding: The syndication's funding, if loaded
            payouts: Payouts made under the syndication

        Returns:
            SyndicationStatistics for the syndication
        """
        stats = SyndicationStatistics()
        self._fill(stats, syndication, funding)

        stats.syndicated_fee_amount = self._flagged_total(syndication.fee_list, "syndication")
        stats.syndicated_credit_amount = self._flagged_total(
            syndication.credit_list, "syndication"
        )

        for payout in self._active(payouts):
            payout_amount = self._amount(payout, "payout_amount")
            fee_amount = self._amount(payout, "fee_amount")
            credit_amount = self._amount(payout, "credit_amount")

            stats.payout_count += 1
            stats.payout_amount += payout_amount
            stats.payout_fee_amount += fee_amount
            stats.payout_credit_amount += credit_amount

            available = payout_amount - fee_amount + credit_amount
            if payout.pending:
                stats.pending_amount += available
            else:
                stats.redeemed_amount += available

        stats.remaining_fee_amount = (
            stats.total_fee_amount - stats.upfront_fee_amount - stats.payout_fee_amount
        )
        stats.remaining_credit_amount = (
            stats.total_credit_amount - stats.upfront_credit_amount - stats.payout_credit_amount
        )
        stats.remaining_payback_amount = (
            to_decimal(syndication.payback_amount) - stats.payout_amount
        )
        stats.remaining_balance = (
            stats.remaining_payback_amount
            - stats.remaining_fee_amount
            + stats.remaining_credit_amount
        )
        return stats


class PayoutCalculator(StatisticsCalculator):
    """Available amount of a single payout."""

    def calculate(self, payout: Any) -> PayoutStatistics:
        available = (
            self._amount(payout, "payout_amount")
            - self._amount(payout, "fee_amount")
            + self._amount(payout, "credit_amount")
        )
        return PayoutStatistics(available_amount=available if available else ZERO)
