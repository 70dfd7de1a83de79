"""Pydantic schemas for reminder resources."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReminderFrequency(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class Reminder(BaseModel):
    """A reminder as reported by the server.

    Completing a recurring reminder may make the server create the next
    occurrence; the client never schedules one itself.
    """

    id: str
    contact: str
    contact_name: str = ""
    title: str
    due_date: date
    frequency: ReminderFrequency = ReminderFrequency.NONE
    completed: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "contact", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class ReminderCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contact: str = Field(min_length=1)
    title: str = Field(min_length=1)
    due_date: date
    frequency: ReminderFrequency = ReminderFrequency.NONE


class ReminderUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contact: str | None = Field(default=None, min_length=1)
    title: str | None = Field(default=None, min_length=1)
    due_date: date | None = None
    frequency: ReminderFrequency | None = None
