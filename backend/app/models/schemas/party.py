"""Pydantic schemas for counterparties."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class PartyUpdate(BaseModel):
    """Schema for updating a counterparty (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    inactive: Optional[bool] = None

    @field_validator("name", "inactive")
    @classmethod
    def reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        """Name and inactive flag may be omitted but not cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PartyResponse(BaseModel):
    """Schema for counterparty response."""

    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    inactive: bool
    created_at: datetime
    updated_at: datetime
    statistics: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)
