"""Query cache and the per-resource bindings that own invalidation."""
from __future__ import annotations

from friendforce.query.cache import QueryCache, QueryResult, QueryStatus, Subscription
from friendforce.query.contacts import ContactQueries
from friendforce.query.dashboard import DashboardQueries
from friendforce.query.reminders import ReminderQueries

__all__ = [
    "ContactQueries",
    "DashboardQueries",
    "QueryCache",
    "QueryResult",
    "QueryStatus",
    "ReminderQueries",
    "Subscription",
]
