"""Pydantic schemas for dashboard resources."""
from __future__ import annotations

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_contacts: int = 0
    upcoming_reminders: int = 0
    recent_interactions_count: int = 0
    needs_attention: int = 0


class ActionMessage(BaseModel):
    """Acknowledgement returned by action endpoints such as complete or log-interaction."""

    message: str = ""
