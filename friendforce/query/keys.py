"""Hierarchical cache keys.

Keys are tuples; invalidating a key also invalidates every key that starts
with it, so ``CONTACTS`` covers ``contact(id)`` and ``DASHBOARD`` covers the
stats, stale and recent reads.
"""
from __future__ import annotations

QueryKey = tuple[str, ...]

CONTACTS: QueryKey = ("contacts",)
REMINDERS: QueryKey = ("reminders",)
REMINDERS_UPCOMING: QueryKey = (*REMINDERS, "upcoming")
DASHBOARD: QueryKey = ("dashboard",)
DASHBOARD_STATS: QueryKey = (*DASHBOARD, "stats")
DASHBOARD_STALE: QueryKey = (*DASHBOARD, "stale")
DASHBOARD_RECENT: QueryKey = (*DASHBOARD, "recent")


def contact(contact_id: str) -> QueryKey:
    return (*CONTACTS, str(contact_id))


def reminder(reminder_id: str) -> QueryKey:
    return (*REMINDERS, str(reminder_id))


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    """Return whether ``key`` is ``prefix`` or nested under it."""
    return key[: len(prefix)] == prefix


def format_key(key: QueryKey) -> str:
    return ":".join(key)
