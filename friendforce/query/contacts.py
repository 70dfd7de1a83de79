"""Contact reads and mutations bound to the query cache."""
from __future__ import annotations

import logging

from friendforce.api.contacts import ContactsApi
from friendforce.query import keys
from friendforce.query.cache import Listener, QueryCache, Subscription
from friendforce.schemas import ActionMessage, Contact, ContactCreate, ContactUpdate

logger = logging.getLogger(__name__)

# Dashboard aggregates are derived from contacts, so every contact change refreshes them.
CONTACT_MUTATION_KEYS = (keys.CONTACTS, keys.DASHBOARD)


class ContactQueries:
    def __init__(self, cache: QueryCache, api: ContactsApi):
        self.cache = cache
        self.api = api

    async def list(self) -> list[Contact]:
        return await self.cache.read(keys.CONTACTS, self.api.list)

    async def get(self, contact_id: str | None) -> Contact | None:
        """Return one contact; an empty id is a disabled read and fetches nothing."""

        return await self.cache.read(
            keys.contact(contact_id or ""),
            lambda: self.api.get(contact_id or ""),
            enabled=bool(contact_id),
        )

    def subscribe_list(self, listener: Listener) -> Subscription:
        return self.cache.subscribe(keys.CONTACTS, self.api.list, listener)

    async def create(self, payload: ContactCreate) -> Contact:
        contact = await self.cache.mutate(lambda: self.api.create(payload), CONTACT_MUTATION_KEYS)
        logger.info("Contact created", extra={"contact_id": contact.id})
        return contact

    async def update(self, contact_id: str, payload: ContactUpdate) -> Contact:
        return await self.cache.mutate(
            lambda: self.api.update(contact_id, payload), CONTACT_MUTATION_KEYS
        )

    async def delete(self, contact_id: str) -> None:
        await self.cache.mutate(lambda: self.api.delete(contact_id), CONTACT_MUTATION_KEYS)
        logger.info("Contact deleted", extra={"contact_id": contact_id})

    async def log_interaction(self, contact_id: str) -> ActionMessage:
        return await self.cache.mutate(
            lambda: self.api.log_interaction(contact_id), CONTACT_MUTATION_KEYS
        )
