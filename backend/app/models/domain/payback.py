"""Payback plan and payback domain models."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import (
    DistributionPriority,
    PaybackFrequency,
    PaybackPlanStatus,
    PaybackStatus,
    PaymentMethod,
)
from app.db.base import BaseModel


class PaybackPlan(BaseModel):
    """Recurring debit schedule repaying a funding."""

    __tablename__ = "payback_plans"

    # Foreign Keys
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    merchant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("merchants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lender_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("lenders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Payment
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method"),
        nullable=True,
    )

    # Schedule
    total_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    payback_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    next_payback_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    frequency: Mapped[Optional[PaybackFrequency]] = mapped_column(
        SQLEnum(PaybackFrequency, name="payback_frequency"),
        nullable=True,
    )
    payday_list: Mapped[list[int]] = mapped_column(JSON, default=list, nullable=False)
    avoid_holiday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    distribution_priority: Mapped[DistributionPriority] = mapped_column(
        SQLEnum(DistributionPriority, name="distribution_priority"),
        default=DistributionPriority.FUND,
        nullable=False,
    )

    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[PaybackPlanStatus] = mapped_column(
        SQLEnum(PaybackPlanStatus, name="payback_plan_status"),
        default=PaybackPlanStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    # Relationships
    paybacks: Mapped[list["Payback"]] = relationship(
        "Payback",
        back_populates="payback_plan",
    )

    def __repr__(self) -> str:
        return (
            f"<PaybackPlan(id={self.id}, funding_id={self.funding_id}, "
            f"frequency={self.frequency.value if self.frequency else None}, "
            f"total={self.total_amount}, status={self.status.value})>"
        )


class Payback(BaseModel):
    """Single debit against the merchant's account."""

    __tablename__ = "paybacks"

    # Foreign Keys
    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payback_plan_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("payback_plans.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    merchant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("merchants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Dates
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    submitted_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    processed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Amounts
    payback_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    funded_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    fee_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )

    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method"),
        nullable=True,
    )
    status: Mapped[PaybackStatus] = mapped_column(
        SQLEnum(PaybackStatus, name="payback_status"),
        default=PaybackStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reconciled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    payback_plan: Mapped[Optional["PaybackPlan"]] = relationship(
        "PaybackPlan",
        back_populates="paybacks",
    )

    def __repr__(self) -> str:
        return (
            f"<Payback(id={self.id}, due={self.due_date}, "
            f"amount={self.payback_amount}, status={self.status.value})>"
        )
