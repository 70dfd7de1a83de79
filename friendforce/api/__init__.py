"""Resource clients for the remote FriendForce REST API."""
from __future__ import annotations

from friendforce.api.contacts import ContactsApi
from friendforce.api.dashboard import DashboardApi
from friendforce.api.reminders import RemindersApi
from friendforce.api.transport import ApiTransport

__all__ = ["ApiTransport", "ContactsApi", "DashboardApi", "RemindersApi"]
