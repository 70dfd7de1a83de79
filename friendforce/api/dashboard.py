"""Dashboard resource client."""
from __future__ import annotations

from friendforce.api.transport import ApiTransport
from friendforce.schemas import Contact, DashboardStats


class DashboardApi:
    def __init__(self, transport: ApiTransport):
        self._transport = transport

    async def stats(self) -> DashboardStats:
        data = await self._transport.request("/dashboard/")
        return DashboardStats.model_validate(data or {})

    async def stale(self) -> list[Contact]:
        data = await self._transport.request("/dashboard/stale/")
        return [Contact.model_validate(item) for item in data or []]

    async def recent(self) -> list[Contact]:
        data = await self._transport.request("/dashboard/recent/")
        return [Contact.model_validate(item) for item in data or []]
