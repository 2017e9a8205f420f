"""Counterparty domain models: funders, lenders, merchants, ISOs and syndicators."""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import BaseModel


class Funder(BaseModel):
    """Funding company operating the CRM."""

    __tablename__ = "funders"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    lenders: Mapped[list["Lender"]] = relationship(
        "Lender",
        back_populates="funder",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Funder(id={self.id}, name={self.name!r})>"


class Lender(BaseModel):
    """Lending entity owned by a funder."""

    __tablename__ = "lenders"

    funder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("funders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    funder: Mapped["Funder"] = relationship("Funder", back_populates="lenders")

    def __repr__(self) -> str:
        return f"<Lender(id={self.id}, name={self.name!r}, funder_id={self.funder_id})>"


class Merchant(BaseModel):
    """Business receiving cash advances."""

    __tablename__ = "merchants"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    dba_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Merchant(id={self.id}, name={self.name!r})>"


class ISO(BaseModel):
    """Independent sales organization brokering applications."""

    __tablename__ = "isos"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ISO(id={self.id}, name={self.name!r})>"


class Syndicator(BaseModel):
    """Third-party investor participating in fundings."""

    __tablename__ = "syndicators"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Syndicator(id={self.id}, name={self.name!r})>"
