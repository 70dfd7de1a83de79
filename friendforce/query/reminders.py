"""Reminder reads and mutations bound to the query cache."""
from __future__ import annotations

import logging

from friendforce.api.reminders import RemindersApi
from friendforce.query import keys
from friendforce.query.cache import Listener, QueryCache, Subscription
from friendforce.schemas import ActionMessage, Reminder, ReminderCreate, ReminderUpdate

logger = logging.getLogger(__name__)

REMINDER_MUTATION_KEYS = (keys.REMINDERS, keys.DASHBOARD)


class ReminderQueries:
    def __init__(self, cache: QueryCache, api: RemindersApi):
        self.cache = cache
        self.api = api

    async def list(self) -> list[Reminder]:
        return await self.cache.read(keys.REMINDERS, self.api.list)

    async def upcoming(self) -> list[Reminder]:
        return await self.cache.read(keys.REMINDERS_UPCOMING, self.api.upcoming)

    async def get(self, reminder_id: str | None) -> Reminder | None:
        return await self.cache.read(
            keys.reminder(reminder_id or ""),
            lambda: self.api.get(reminder_id or ""),
            enabled=bool(reminder_id),
        )

    def subscribe_list(self, listener: Listener) -> Subscription:
        return self.cache.subscribe(keys.REMINDERS, self.api.list, listener)

    def subscribe_upcoming(self, listener: Listener) -> Subscription:
        return self.cache.subscribe(keys.REMINDERS_UPCOMING, self.api.upcoming, listener)

    async def create(self, payload: ReminderCreate) -> Reminder:
        reminder = await self.cache.mutate(
            lambda: self.api.create(payload), REMINDER_MUTATION_KEYS
        )
        logger.info("Reminder created", extra={"reminder_id": reminder.id})
        return reminder

    async def update(self, reminder_id: str, payload: ReminderUpdate) -> Reminder:
        return await self.cache.mutate(
            lambda: self.api.update(reminder_id, payload), REMINDER_MUTATION_KEYS
        )

    async def delete(self, reminder_id: str) -> None:
        await self.cache.mutate(lambda: self.api.delete(reminder_id), REMINDER_MUTATION_KEYS)
        logger.info("Reminder deleted", extra={"reminder_id": reminder_id})

    async def complete(self, reminder_id: str) -> ActionMessage:
        """Mark a reminder done. Any follow-up occurrence is created by the server."""

        return await self.cache.mutate(
            lambda: self.api.complete(reminder_id), REMINDER_MUTATION_KEYS
        )
