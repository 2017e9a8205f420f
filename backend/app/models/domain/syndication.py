"""Syndication offers, syndications and payouts."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import SyndicationOfferStatus, SyndicationStatus
from app.db.base import BaseModel


class SyndicationOffer(BaseModel):
    """Offer to a syndicator to participate in a funding."""

    __tablename__ = "syndication_offers"

    # Foreign Keys
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    syndicator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("syndicators.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Funding snapshot
    funding_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    funding_identifier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Participation
    participate_percent: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    participate_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    payback_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    # Adjustments: [{"name", "amount", "upfront", "syndication"}]
    fee_list: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    credit_list: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    offered_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[SyndicationOfferStatus] = mapped_column(
        SQLEnum(SyndicationOfferStatus, name="syndication_offer_status"),
        default=SyndicationOfferStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<SyndicationOffer(id={self.id}, funding={self.funding_name!r}, "
            f"amount={self.participate_amount}, status={self.status.value})>"
        )


class Syndication(BaseModel):
    """Accepted syndicator participation in a funding."""

    __tablename__ = "syndications"

    # Foreign Keys
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    syndicator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("syndicators.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    syndication_offer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("syndication_offers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Funding snapshot
    funding_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    funding_identifier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Participation
    participate_percent: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    participate_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    payback_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    fee_list: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    credit_list: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[SyndicationStatus] = mapped_column(
        SQLEnum(SyndicationStatus, name="syndication_status"),
        default=SyndicationStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<Syndication(id={self.id}, funding={self.funding_name!r}, "
            f"amount={self.participate_amount}, status={self.status.value})>"
        )


class Payout(BaseModel):
    """Share of collected paybacks paid out to a syndicator."""

    __tablename__ = "payouts"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    syndicator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("syndicators.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    syndication_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("syndications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payback_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("paybacks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    payout_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    pending: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    @property
    def available_amount(self) -> Decimal:
        """Amount the syndicator actually receives."""
        return (self.payout_amount or 0) - (self.fee_amount or 0) + (self.credit_amount or 0)

    def __repr__(self) -> str:
        return (
            f"<Payout(id={self.id}, syndication_id={self.syndication_id}, "
            f"amount={self.payout_amount}, pending={self.pending})>"
        )
