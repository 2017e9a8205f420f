"""Disbursement and commission intents with their executions."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Numeric,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import IntentStatus, PaymentMethod, TransferStatus
from app.db.base import BaseModel


class DisbursementIntent(BaseModel):
    """Scheduled transfer of funded money to the merchant."""

    __tablename__ = "disbursement_intents"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    scheduled_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method"),
        nullable=True,
    )
    status: Mapped[IntentStatus] = mapped_column(
        SQLEnum(IntentStatus, name="intent_status"),
        default=IntentStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    disbursements: Mapped[list["Disbursement"]] = relationship(
        "Disbursement",
        back_populates="intent",
    )

    def __repr__(self) -> str:
        return (
            f"<DisbursementIntent(id={self.id}, amount={self.amount}, "
            f"status={self.status.value})>"
        )


class Disbursement(BaseModel):
    """Executed transfer against a disbursement intent."""

    __tablename__ = "disbursements"

    disbursement_intent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("disbursement_intents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    transfer_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[TransferStatus] = mapped_column(
        SQLEnum(TransferStatus, name="transfer_status"),
        default=TransferStatus.SUBMITTED,
        nullable=False,
        index=True,
    )

    intent: Mapped["DisbursementIntent"] = relationship(
        "DisbursementIntent",
        back_populates="disbursements",
    )

    def __repr__(self) -> str:
        return (
            f"<Disbursement(id={self.id}, amount={self.amount}, "
            f"status={self.status.value})>"
        )


class CommissionIntent(BaseModel):
    """Scheduled commission payment to the ISO."""

    __tablename__ = "commission_intents"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    iso_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("isos.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    scheduled_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method"),
        nullable=True,
    )
    status: Mapped[IntentStatus] = mapped_column(
        SQLEnum(IntentStatus, name="intent_status"),
        default=IntentStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    commissions: Mapped[list["Commission"]] = relationship(
        "Commission",
        back_populates="intent",
    )

    def __repr__(self) -> str:
        return (
            f"<CommissionIntent(id={self.id}, amount={self.amount}, "
            f"status={self.status.value})>"
        )


class Commission(BaseModel):
    """Executed transfer against a commission intent."""

    __tablename__ = "commissions"

    commission_intent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("commission_intents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    transfer_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[TransferStatus] = mapped_column(
        SQLEnum(TransferStatus, name="transfer_status"),
        default=TransferStatus.SUBMITTED,
        nullable=False,
        index=True,
    )

    intent: Mapped["CommissionIntent"] = relationship(
        "CommissionIntent",
        back_populates="commissions",
    )

    def __repr__(self) -> str:
        return (
            f"<Commission(id={self.id}, amount={self.amount}, "
            f"status={self.status.value})>"
        )
