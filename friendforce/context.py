"""Wiring of transport, resource clients, query cache and page dialogs."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import httpx

from friendforce.api import ApiTransport, ContactsApi, DashboardApi, RemindersApi
from friendforce.core.config import Settings
from friendforce.errors import SubmissionInProgressError
from friendforce.forms import (
    BLAST_DEFAULTS,
    CONTACT_FORM_DEFAULTS,
    LOG_MEETUP_DEFAULTS,
    REMINDER_FORM_DEFAULTS,
    DialogForm,
    DialogHost,
)
from friendforce.query import ContactQueries, DashboardQueries, QueryCache, ReminderQueries


def _default_dialogs() -> dict[str, DialogHost]:
    return {
        "dashboard": DialogHost(DialogForm("log_meetup", LOG_MEETUP_DEFAULTS)),
        "contacts": DialogHost(DialogForm("add_contact", CONTACT_FORM_DEFAULTS)),
        "reminders": DialogHost(DialogForm("add_reminder", REMINDER_FORM_DEFAULTS)),
        "blasts": DialogHost(DialogForm("compose", BLAST_DEFAULTS)),
    }


@dataclass
class ClientContext:
    settings: Settings
    transport: ApiTransport
    cache: QueryCache
    contacts: ContactQueries
    reminders: ReminderQueries
    dashboard: DashboardQueries
    dialogs: dict[str, DialogHost] = field(default_factory=_default_dialogs)
    # Row actions (delete, complete) awaiting the API, as ``(action, id)``.
    pending_actions: set[tuple[str, str]] = field(default_factory=set)

    def dialog(self, page: str, name: str) -> DialogForm:
        return self.dialogs[page][name]

    @asynccontextmanager
    async def guard(self, action: str, item_id: str) -> AsyncIterator[None]:
        """Hold ``(action, item_id)`` as pending; a second concurrent use is refused."""

        intent = (action, item_id)
        if intent in self.pending_actions:
            raise SubmissionInProgressError(f"{action} {item_id} is already in progress")
        self.pending_actions.add(intent)
        try:
            yield
        finally:
            self.pending_actions.discard(intent)

    async def aclose(self) -> None:
        await self.cache.settle()
        await self.transport.aclose()


def build_context(
    settings: Settings, *, http_transport: httpx.AsyncBaseTransport | None = None
) -> ClientContext:
    """Create a client context; ``http_transport`` replaces the network layer in tests."""

    transport = ApiTransport(settings, transport=http_transport)
    cache = QueryCache(retention_seconds=settings.cache_retention_seconds)
    return ClientContext(
        settings=settings,
        transport=transport,
        cache=cache,
        contacts=ContactQueries(cache, ContactsApi(transport)),
        reminders=ReminderQueries(cache, RemindersApi(transport)),
        dashboard=DashboardQueries(cache, DashboardApi(transport)),
    )
