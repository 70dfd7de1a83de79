"""Reminders resource client."""
from __future__ import annotations

from friendforce.api.transport import ApiTransport
from friendforce.schemas import ActionMessage, Reminder, ReminderCreate, ReminderUpdate


class RemindersApi:
    """Map reminder operations onto ``/reminders/`` endpoints."""

    def __init__(self, transport: ApiTransport):
        self._transport = transport

    async def list(self) -> list[Reminder]:
        data = await self._transport.request("/reminders/")
        return [Reminder.model_validate(item) for item in data or []]

    async def get(self, reminder_id: str) -> Reminder:
        data = await self._transport.request(f"/reminders/{reminder_id}/")
        return Reminder.model_validate(data)

    async def create(self, payload: ReminderCreate) -> Reminder:
        body = payload.model_dump(mode="json")
        data = await self._transport.request("/reminders/", "POST", body)
        return Reminder.model_validate(data)

    async def update(self, reminder_id: str, payload: ReminderUpdate) -> Reminder:
        body = payload.model_dump(mode="json", exclude_unset=True)
        data = await self._transport.request(f"/reminders/{reminder_id}/", "PATCH", body)
        return Reminder.model_validate(data)

    async def delete(self, reminder_id: str) -> None:
        await self._transport.request(f"/reminders/{reminder_id}/", "DELETE")

    async def upcoming(self) -> list[Reminder]:
        """Return the reminders the server considers due soon."""

        data = await self._transport.request("/reminders/upcoming/")
        return [Reminder.model_validate(item) for item in data or []]

    async def complete(self, reminder_id: str) -> ActionMessage:
        data = await self._transport.request(f"/reminders/{reminder_id}/complete/", "POST")
        return ActionMessage.model_validate(data or {})
