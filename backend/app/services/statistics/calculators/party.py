"""Application and counterparty statistics."""

from typing import Any, Iterable

from app.core.enums import StipulationStatus, SyndicationOfferStatus, SyndicationStatus
from app.services.statistics.base import StatisticsCalculator
from app.services.statistics.results import (
    ApplicationStatistics,
    FunderStatistics,
    MerchantStatistics,
    SyndicatorStatistics,
)

CHECKED_STIPULATION_STATUSES = (StipulationStatus.VERIFIED, StipulationStatus.WAIVED)


class ApplicationCalculator(StatisticsCalculator):
    """Stipulation progress of an application."""

    def calculate(self, application: Any, stipulations: Iterable[Any] = ()) -> ApplicationStatistics:
        stipulations = list(stipulations)
        return ApplicationStatistics(
            stipulation_count=len(stipulations),
            requested_count=sum(
                1 for stip in stipulations if stip.status == StipulationStatus.REQUESTED
            ),
            received_count=sum(
                1 for stip in stipulations if stip.status == StipulationStatus.RECEIVED
            ),
            checked_count=sum(
                1 for stip in stipulations if stip.status in CHECKED_STIPULATION_STATUSES
            ),
        )


class MerchantCalculator(StatisticsCalculator):
    """Applications and fundings of a merchant."""

    def calculate(
        self,
        merchant: Any,
        applications: Iterable[Any] = (),
        fundings: Iterable[Any] = (),
    ) -> MerchantStatistics:
        """
        Compute a merchant's statistics.

        Fundings flagged closed count as completed, all others as active;
        warning and defaulted flags are counted on top of that split.

        Args:
            merchant: Merchant row
            applications: Applications of the merchant
            fundings: Fundings of the merchant

        Returns:
            MerchantStatistics for the merchant
        """
        applications = self._active(applications)
        fundings = self._active(fundings)
        stats = MerchantStatistics()

        stats.application_count, stats.application_request_amount = self._total(
            applications, "request_amount"
        )
        stats.pending_application_count, stats.pending_application_request_amount = self._total(
            applications, "request_amount", where=lambda app: not app.closed
        )

        stats.funding_count, stats.funding_amount = self._total(fundings, "funded_amount")
        stats.completed_funding_count, stats.completed_funding_amount = self._total(
            fundings, "funded_amount", where=lambda funding: funding.closed
        )
        stats.active_funding_count, stats.active_funding_amount = self._total(
            fundings, "funded_amount", where=lambda funding: not funding.closed
        )
        stats.warning_funding_count, stats.warning_funding_amount = self._total(
            fundings, "funded_amount", where=lambda funding: funding.warning
        )
        stats.defaulted_funding_count, stats.defaulted_funding_amount = self._total(
            fundings, "funded_amount", where=lambda funding: funding.defaulted
        )
        return stats


class FunderCalculator(StatisticsCalculator):
    """Portfolio of a funder."""

    def calculate(
        self,
        funder: Any,
        lenders: Iterable[Any] = (),
        applications: Iterable[Any] = (),
        fundings: Iterable[Any] = (),
        syndication_offers: Iterable[Any] = (),
        syndications: Iterable[Any] = (),
    ) -> FunderStatistics:
        """
        Compute a funder's statistics.

        Args:
            funder: Funder row
            lenders: Lenders owned by the funder
            applications: Applications addressed to the funder
            fundings: Fundings issued by the funder
            syndication_offers: Offers the funder made
            syndications: Syndications of the funder's fundings

        Returns:
            FunderStatistics for the funder
        """
        applications = self._active(applications)
        syndications = self._active(syndications)
        stats = FunderStatistics()

        stats.lender_count = len(self._active(lenders))
        stats.application_count = len(applications)
        stats.pending_application_count = sum(1 for app in applications if not app.closed)
        stats.funding_count = len(self._active(fundings))

        _, stats.pending_syndication_offer_amount = self._total(
            self._active(syndication_offers),
            "participate_amount",
            where=lambda offer: offer.status == SyndicationOfferStatus.SUBMITTED,
        )

        stats.syndication_count = len(syndications)
        stats.active_syndication_count, stats.active_syndication_amount = self._total(
            syndications,
            "participate_amount",
            where=lambda syndication: syndication.status == SyndicationStatus.ACTIVE,
        )
        stats.closed_syndication_count = sum(
            1 for syndication in syndications if syndication.status == SyndicationStatus.CLOSED
        )
        return stats


class SyndicatorCalculator(StatisticsCalculator):
    """Offers received and syndications held by a syndicator."""

    def calculate(
        self,
        syndicator: Any,
        syndication_offers: Iterable[Any] = (),
        syndications: Iterable[Any] = (),
    ) -> SyndicatorStatistics:
        """
        Compute a syndicator's statistics.

        Expired offers count as cancelled.

        Args:
            syndicator: Syndicator row
            syndication_offers: Offers made to the syndicator
            syndications: Syndications held by the syndicator

        Returns:
            SyndicatorStatistics for the syndicator
        """
        offers = self._active(syndication_offers)
        syndications = self._active(syndications)
        stats = SyndicatorStatistics()

        stats.syndication_offer_count, stats.syndication_offer_amount = self._total(
            offers, "participate_amount"
        )
        stats.pending_syndication_offer_count, stats.pending_syndication_offer_amount = self._total(
            offers,
            "participate_amount",
            where=lambda offer: offer.status == SyndicationOfferStatus.SUBMITTED,
        )
        stats.accepted_syndication_offer_count, stats.accepted_syndication_offer_amount = self._total(
            offers,
            "participate_amount",
            where=lambda offer: offer.status == SyndicationOfferStatus.ACCEPTED,
        )
        stats.declined_syndication_offer_count, stats.declined_syndication_offer_amount = self._total(
            offers,
            "participate_amount",
            where=lambda offer: offer.status == SyndicationOfferStatus.DECLINED,
        )
        stats.cancelled_syndication_offer_count, stats.cancelled_syndication_offer_amount = self._total(
            offers,
            "participate_amount",
            where=lambda offer: offer.status
            in (SyndicationOfferStatus.CANCELLED, SyndicationOfferStatus.EXPIRED),
        )

        stats.syndication_count, stats.syndication_amount = self._total(
            syndications, "participate_amount"
        )
        stats.active_syndication_count, stats.active_syndication_amount = self._total(
            syndications,
            "participate_amount",
            where=lambda syndication: syndication.status == SyndicationStatus.ACTIVE,
        )
        stats.closed_syndication_count, stats.closed_syndication_amount = self._total(
            syndications,
            "participate_amount",
            where=lambda syndication: syndication.status == SyndicationStatus.CLOSED,
        )
        return stats
