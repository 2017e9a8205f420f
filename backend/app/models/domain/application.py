"""Application domain models for funding applications and stipulations."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import ApplicationType, StipulationStatus
from app.db.base import BaseModel


class Application(BaseModel):
    """Funding application submitted on behalf of a merchant."""

    __tablename__ = "applications"

    # Identification
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    identifier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    type: Mapped[ApplicationType] = mapped_column(
        SQLEnum(ApplicationType, name="application_type"),
        nullable=False,
        index=True,
    )

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

    # ISO (embedded copy, optional)
    iso_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("isos.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    iso_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    iso_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    iso_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Request
    request_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    request_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    # Flags
    priority: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    internal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    declined_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    stipulations: Mapped[list["ApplicationStipulation"]] = relationship(
        "ApplicationStipulation",
        back_populates="application",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, name={self.name!r}, "
            f"merchant={self.merchant_name!r}, amount={self.request_amount})>"
        )


class ApplicationStipulation(BaseModel):
    """Document or condition requested from the merchant before funding."""

    __tablename__ = "application_stipulations"

    application_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[StipulationStatus] = mapped_column(
        SQLEnum(StipulationStatus, name="stipulation_status"),
        default=StipulationStatus.REQUESTED,
        nullable=False,
        index=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    application: Mapped["Application"] = relationship(
        "Application",
        back_populates="stipulations",
    )

    def __repr__(self) -> str:
        return (
            f"<ApplicationStipulation(id={self.id}, name={self.name!r}, "
            f"status={self.status.value})>"
        )
