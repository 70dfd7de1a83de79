"""Keyed query cache with request de-duplication and explicit invalidation."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from friendforce.query.keys import QueryKey, format_key, matches

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[["QueryResult"], None]

logger = logging.getLogger(__name__)


class QueryStatus(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    FETCHING = "fetching"


@dataclass(frozen=True)
class QueryResult:
    """Snapshot of a cache entry handed to readers and listeners."""

    key: QueryKey
    data: Any = None
    error: Exception | None = None
    status: QueryStatus = QueryStatus.STALE
    has_data: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status is QueryStatus.FETCHING and not self.has_data

    @property
    def is_fresh(self) -> bool:
        return self.status is QueryStatus.FRESH


@dataclass(eq=False)
class CacheEntry:
    key: QueryKey
    data: Any = None
    has_data: bool = False
    error: Exception | None = None
    status: QueryStatus = QueryStatus.STALE
    generation: int = 0
    fetcher: Fetcher | None = None
    inflight: asyncio.Task[Any] | None = None
    subscribers: list[Subscription] = field(default_factory=list)
    updated_at: float | None = None
    stale_since: float | None = None

    def snapshot(self) -> QueryResult:
        return QueryResult(
            key=self.key,
            data=self.data,
            error=self.error,
            status=self.status,
            has_data=self.has_data,
        )


class Subscription:
    """Registration of a listener on one cache key."""

    def __init__(self, cache: QueryCache, entry: CacheEntry, listener: Listener):
        self._cache = cache
        self._entry = entry
        self._listener = listener
        self._active = True

    @property
    def key(self) -> QueryKey:
        return self._entry.key

    @property
    def active(self) -> bool:
        return self._active

    def current(self) -> QueryResult:
        return self._entry.snapshot()

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._cache._detach(self._entry, self)

    def _deliver(self, result: QueryResult) -> None:
        if not self._active:
            return
        try:
            self._listener(result)
        except Exception:
            logger.exception("Query listener failed", extra={"key": format_key(result.key)})


class QueryCache:
    """Cache of remote reads shared by every view of one client.

    Reads of a fresh key are served from memory. Reads issued while a fetch for
    the same key is in flight share that fetch. Values only go stale through
    :meth:`invalidate`; there is no expiry timer and no polling. Entries that
    are stale and unsubscribed for longer than ``retention_seconds`` are pruned.
    """

    def __init__(
        self,
        *,
        retention_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.retention_seconds = retention_seconds
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._background: set[asyncio.Task[Any]] = set()

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def peek(self, key: QueryKey) -> QueryResult:
        """Return the current snapshot for ``key`` without fetching."""
        entry = self._entries.get(key)
        if entry is None:
            return QueryResult(key=key)
        return entry.snapshot()

    async def read(self, key: QueryKey, fetcher: Fetcher, *, enabled: bool = True) -> Any:
        """Return the value for ``key``, fetching it only when missing or stale.

        A disabled read returns ``None`` and never touches the network.
        """

        if not enabled:
            return None

        entry = self._entry(key)
        entry.fetcher = fetcher
        if entry.status is QueryStatus.FRESH and entry.has_data:
            return entry.data

        task = entry.inflight
        if task is None:
            task = self._start_fetch(entry)
        return await asyncio.shield(task)

    def subscribe(self, key: QueryKey, fetcher: Fetcher, listener: Listener) -> Subscription:
        """Register ``listener`` on ``key``.

        A fresh value is delivered synchronously; otherwise a fetch starts and
        the listener hears about its completion. The listener is called again
        after every refresh triggered by invalidation. Must be called from a
        running event loop.
        """

        entry = self._entry(key)
        entry.fetcher = fetcher
        subscription = Subscription(self, entry, listener)
        entry.subscribers.append(subscription)

        if entry.status is QueryStatus.FRESH and entry.has_data:
            subscription._deliver(entry.snapshot())
        elif entry.inflight is None:
            self._start_fetch(entry)
        return subscription

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark ``prefix`` and every nested key stale; return the number of entries hit.

        Fetches already in flight for those keys still resolve for their own
        awaiters but are no longer stored. Subscribed entries refetch in the
        background.
        """

        now = self._clock()
        matched = [entry for key, entry in self._entries.items() if matches(key, prefix)]
        for entry in matched:
            entry.generation += 1
            entry.inflight = None
            entry.status = QueryStatus.STALE
            entry.stale_since = now
            if entry.subscribers and entry.fetcher is not None:
                self._start_fetch(entry)

        logger.debug(
            "Invalidated cache keys",
            extra={"prefix": format_key(prefix), "matched": len(matched)},
        )
        self.prune()
        return len(matched)

    async def mutate(self, mutation: Fetcher, affected_keys: Iterable[QueryKey]) -> Any:
        """Run ``mutation`` and invalidate ``affected_keys`` once it succeeds.

        A failing mutation propagates its error and leaves the cache untouched.
        """

        result = await mutation()
        for key in affected_keys:
            self.invalidate(key)
        return result

    async def settle(self) -> None:
        """Wait until every background refetch has completed."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def prune(self) -> int:
        now = self._clock()
        expired = [
            key
            for key, entry in self._entries.items()
            if not entry.subscribers
            and entry.inflight is None
            and entry.status is QueryStatus.STALE
            and entry.stale_since is not None
            and now - entry.stale_since >= self.retention_seconds
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def _entry(self, key: QueryKey) -> CacheEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key, stale_since=self._clock())
            self._entries[key] = entry
        return entry

    def _start_fetch(self, entry: CacheEntry) -> asyncio.Task[Any]:
        assert entry.fetcher is not None
        entry.status = QueryStatus.FETCHING
        task = asyncio.create_task(self._run_fetch(entry, entry.generation, entry.fetcher))
        entry.inflight = task
        self._background.add(task)
        task.add_done_callback(self._forget)
        logger.debug("Fetching cache key", extra={"key": format_key(entry.key)})
        return task

    def _forget(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if not task.cancelled():
            # Background refetch failures are reported to listeners, not raised.
            task.exception()

    async def _run_fetch(self, entry: CacheEntry, generation: int, fetcher: Fetcher) -> Any:
        try:
            data = await fetcher()
        except Exception as exc:
            if entry.generation == generation:
                entry.inflight = None
                entry.error = exc
                entry.status = QueryStatus.STALE
                self._notify(entry)
            raise

        if entry.generation == generation:
            entry.inflight = None
            entry.data = data
            entry.has_data = True
            entry.error = None
            entry.status = QueryStatus.FRESH
            entry.updated_at = self._clock()
            entry.stale_since = None
            self._notify(entry)
        else:
            logger.debug(
                "Discarded fetch result invalidated mid-flight",
                extra={"key": format_key(entry.key)},
            )
        return data

    def _notify(self, entry: CacheEntry) -> None:
        snapshot = entry.snapshot()
        for subscription in list(entry.subscribers):
            subscription._deliver(snapshot)

    def _detach(self, entry: CacheEntry, subscription: Subscription) -> None:
        if subscription in entry.subscribers:
            entry.subscribers.remove(subscription)
        if not entry.subscribers and entry.status is not QueryStatus.FRESH:
            if entry.stale_since is None:
                entry.stale_since = self._clock()
