"""Dashboard tiles."""
from __future__ import annotations

from dataclasses import dataclass

from friendforce.schemas import DashboardStats


@dataclass(frozen=True)
class StatItem:
    label: str
    value: int
    color: str


def stat_items(stats: DashboardStats | None) -> list[StatItem]:
    """Build the four summary tiles; missing stats render as zero."""

    stats = stats or DashboardStats()
    return [
        StatItem("Total Contacts", stats.total_contacts, "primary"),
        StatItem("Upcoming Reminders", stats.upcoming_reminders, "accent"),
        StatItem("Recent Interactions", stats.recent_interactions_count, "primary"),
        StatItem("Needs Attention", stats.needs_attention, "accent"),
    ]
