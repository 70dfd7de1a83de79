"""Contacts resource client."""
from __future__ import annotations

from friendforce.api.transport import ApiTransport
from friendforce.schemas import ActionMessage, Contact, ContactCreate, ContactUpdate


class ContactsApi:
    """Map contact operations onto ``/contacts/`` endpoints."""

    def __init__(self, transport: ApiTransport):
        self._transport = transport

    async def list(self) -> list[Contact]:
        data = await self._transport.request("/contacts/")
        return [Contact.model_validate(item) for item in data or []]

    async def get(self, contact_id: str) -> Contact:
        data = await self._transport.request(f"/contacts/{contact_id}/")
        return Contact.model_validate(data)

    async def create(self, payload: ContactCreate) -> Contact:
        body = payload.model_dump(mode="json", exclude_none=True)
        data = await self._transport.request("/contacts/", "POST", body)
        return Contact.model_validate(data)

    async def update(self, contact_id: str, payload: ContactUpdate) -> Contact:
        body = payload.model_dump(mode="json", exclude_unset=True)
        data = await self._transport.request(f"/contacts/{contact_id}/", "PATCH", body)
        return Contact.model_validate(data)

    async def delete(self, contact_id: str) -> None:
        await self._transport.request(f"/contacts/{contact_id}/", "DELETE")

    async def log_interaction(self, contact_id: str) -> ActionMessage:
        """Record an interaction now; the server updates ``last_contact``."""

        data = await self._transport.request(f"/contacts/{contact_id}/log-interaction/", "POST")
        return ActionMessage.model_validate(data or {})
