"""Read-only dashboard queries."""
from __future__ import annotations

from friendforce.api.dashboard import DashboardApi
from friendforce.query import keys
from friendforce.query.cache import Listener, QueryCache, Subscription
from friendforce.schemas import Contact, DashboardStats


class DashboardQueries:
    def __init__(self, cache: QueryCache, api: DashboardApi):
        self.cache = cache
        self.api = api

    async def stats(self) -> DashboardStats:
        return await self.cache.read(keys.DASHBOARD_STATS, self.api.stats)

    async def stale(self) -> list[Contact]:
        return await self.cache.read(keys.DASHBOARD_STALE, self.api.stale)

    async def recent(self) -> list[Contact]:
        return await self.cache.read(keys.DASHBOARD_RECENT, self.api.recent)

    def subscribe_stats(self, listener: Listener) -> Subscription:
        return self.cache.subscribe(keys.DASHBOARD_STATS, self.api.stats, listener)
