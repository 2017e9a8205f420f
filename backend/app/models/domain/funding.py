"""Funding domain models with fees, expenses and credits."""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import FundingType
from app.db.base import BaseModel


class Funding(BaseModel):
    """Cash advance issued to a merchant."""

    __tablename__ = "fundings"

    # Identification
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    identifier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    type: Mapped[FundingType] = mapped_column(
        SQLEnum(FundingType, name="funding_type"),
        default=FundingType.NEW,
        nullable=False,
    )
    application_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Funder (embedded copy)
    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    funder_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    funder_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    funder_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Lender (embedded copy)
    lender_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("lenders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    lender_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    lender_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lender_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Merchant (embedded copy)
    merchant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("merchants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    merchant_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    merchant_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    merchant_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Amounts
    funded_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    payback_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    position: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Status flags
    closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    warning: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    defaulted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    internal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    fees: Mapped[list["FundingFee"]] = relationship(
        "FundingFee",
        back_populates="funding",
        cascade="all, delete-orphan",
    )
    expenses: Mapped[list["FundingExpense"]] = relationship(
        "FundingExpense",
        back_populates="funding",
        cascade="all, delete-orphan",
    )
    credits: Mapped[list["FundingCredit"]] = relationship(
        "FundingCredit",
        back_populates="funding",
        cascade="all, delete-orphan",
    )

    @property
    def factor_rate(self) -> Decimal:
        """Payback amount per funded dollar."""
        if not self.funded_amount:
            return Decimal("0")
        return self.payback_amount / self.funded_amount

    def __repr__(self) -> str:
        return (
            f"<Funding(id={self.id}, name={self.name!r}, "
            f"funded={self.funded_amount}, payback={self.payback_amount})>"
        )


class FundingFee(BaseModel):
    """Fee charged on a funding, either upfront or collected through paybacks."""

    __tablename__ = "funding_fees"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    upfront: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    funding: Mapped["Funding"] = relationship("Funding", back_populates="fees")

    def __repr__(self) -> str:
        return f"<FundingFee(id={self.id}, amount={self.amount}, upfront={self.upfront})>"


class FundingExpense(BaseModel):
    """Expense paid by the funder for a funding; commissions are flagged."""

    __tablename__ = "funding_expenses"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    commission: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    funding: Mapped["Funding"] = relationship("Funding", back_populates="expenses")

    def __repr__(self) -> str:
        return (
            f"<FundingExpense(id={self.id}, amount={self.amount}, "
            f"commission={self.commission})>"
        )


class FundingCredit(BaseModel):
    """Credit granted to the merchant, reducing the balance owed."""

    __tablename__ = "funding_credits"

    funding_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("fundings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    funding: Mapped["Funding"] = relationship("Funding", back_populates="credits")

    def __repr__(self) -> str:
        return f"<FundingCredit(id={self.id}, amount={self.amount})>"
