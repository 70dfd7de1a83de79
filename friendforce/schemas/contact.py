"""Pydantic schemas for contact resources."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ContactType(str, Enum):
    FRIEND = "friend"
    PROFESSIONAL = "professional"
    MENTOR = "mentor"


class Contact(BaseModel):
    """A contact as reported by the server. ``needs_attention`` is server-derived."""

    id: str
    name: str
    email: str = ""
    phone: str = ""
    contact_type: ContactType = ContactType.FRIEND
    birthday: date | None = None
    last_contact: datetime | None = None
    notes: str = ""
    needs_attention: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class ContactCreate(BaseModel):
    """Payload for creating a contact; blank optional fields are left out."""

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    contact_type: ContactType = ContactType.FRIEND
    email: EmailStr | None = None
    phone: str | None = None
    birthday: date | None = None
    notes: str | None = None

    @field_validator("email", "phone", "notes", "birthday", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactUpdate(BaseModel):
    """Partial update; only explicitly provided fields are sent."""

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1)] | None = None
    contact_type: ContactType | None = None
    email: EmailStr | Literal[""] | None = None
    phone: str | None = None
    birthday: date | None = None
    notes: str | None = None
