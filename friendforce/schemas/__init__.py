"""Pydantic schemas for the FriendForce client."""

from .contact import Contact, ContactCreate, ContactType, ContactUpdate
from .dashboard import ActionMessage, DashboardStats
from .reminder import Reminder, ReminderCreate, ReminderFrequency, ReminderUpdate

__all__ = [
    "ActionMessage",
    "Contact",
    "ContactCreate",
    "ContactType",
    "ContactUpdate",
    "DashboardStats",
    "Reminder",
    "ReminderCreate",
    "ReminderFrequency",
    "ReminderUpdate",
]
