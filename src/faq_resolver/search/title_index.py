"""In-memory title index used for fuzzy fallback and autocomplete.

The cache holds an immutable snapshot of every ``(tenant_id, title)`` pair in
the document store. ``refresh`` builds a brand new snapshot from the store
and swaps it in; readers grab the current snapshot reference and work on it
without holding the guard. A reader therefore never observes a half-built
snapshot, and a refresh only blocks readers for the duration of the swap.

The cache is never a source of truth for content, only for candidate titles.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
import itertools
import logging
import threading
from typing import TYPE_CHECKING

from faq_resolver.domain.errors import CacheUnavailableError
from faq_resolver.domain.model import IndexEntry
from faq_resolver.observability.metrics import CACHE_ENTRIES, CACHE_REFRESH_COUNT
from faq_resolver.observability.tracing import create_span


if TYPE_CHECKING:
    from faq_resolver.adapters.document_store import AbstractDocumentStore


logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


@dataclass(frozen=True, slots=True)
class TitleSnapshot:
    """Immutable projection of the store's titles."""

    entries: tuple[IndexEntry, ...] = ()
    by_tenant: dict[int, tuple[str, ...]] = field(default_factory=dict)
    generation: int = 0
    refreshed_at: datetime | None = None

    @classmethod
    def build(cls, entries: list[IndexEntry], generation: int) -> TitleSnapshot:
        grouped: dict[int, dict[str, None]] = {}
        for entry in entries:
            grouped.setdefault(entry.tenant_id, {})[entry.title] = None
        return cls(
            entries=tuple(entries),
            by_tenant={tenant_id: tuple(titles) for tenant_id, titles in grouped.items()},
            generation=generation,
            refreshed_at=datetime.now(timezone.utc),
        )


class TitleIndexCache:
    """Shared, concurrency-safe title index.

    One instance is created by the composition root and handed to every
    component that needs it.
    """

    def __init__(self, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self.lock_timeout = lock_timeout
        self._guard = threading.Lock()
        self._snapshot = TitleSnapshot()
        self._generations = itertools.count(1)
        self._closed = False

    def _acquire(self) -> None:
        if self._closed:
            raise CacheUnavailableError("Title index cache is closed")
        if not self._guard.acquire(timeout=self.lock_timeout):
            raise CacheUnavailableError(f"Could not acquire title index cache within {self.lock_timeout}s")

    def _current(self) -> TitleSnapshot:
        self._acquire()
        try:
            return self._snapshot
        finally:
            self._guard.release()

    async def refresh(self, store: AbstractDocumentStore) -> int:
        """Rebuild the index from ``store`` and swap it in atomically.

        Store errors propagate unchanged. A refresh that started before a
        newer one finished never replaces the newer snapshot.

        Returns:
            Number of ``(tenant_id, title)`` pairs in the new snapshot
        """
        if self._closed:
            raise CacheUnavailableError("Title index cache is closed")

        generation = next(self._generations)
        with create_span("faq.cache.refresh", attributes={"faq.cache.generation": generation}):
            try:
                entries = await store.get_all_titles()
            except Exception:
                CACHE_REFRESH_COUNT.labels(status="error").inc()
                raise

            snapshot = TitleSnapshot.build(entries, generation)

            try:
                self._acquire()
            except CacheUnavailableError:
                CACHE_REFRESH_COUNT.labels(status="unavailable").inc()
                raise
            try:
                if snapshot.generation < self._snapshot.generation:
                    CACHE_REFRESH_COUNT.labels(status="superseded").inc()
                    logger.debug("Discarding title index generation %d (current %d)", generation, self._snapshot.generation)
                    return len(self._snapshot.entries)
                self._snapshot = snapshot
            finally:
                self._guard.release()

        CACHE_REFRESH_COUNT.labels(status="success").inc()
        CACHE_ENTRIES.set(len(snapshot.entries))
        logger.info(
            "Title index refreshed: %d titles across %d tenants",
            len(snapshot.entries),
            len(snapshot.by_tenant),
        )
        return len(snapshot.entries)

    def titles_for_tenant(self, tenant_id: int) -> tuple[str, ...]:
        """All cached titles of one tenant, without duplicates, in cache order."""
        return self._current().by_tenant.get(tenant_id, ())

    def lookup_by_prefix(self, tenant_id: int, prefix: str) -> Iterator[str]:
        """Lazily yield the tenant's titles starting with ``prefix`` (case-insensitive).

        The snapshot is taken when this method is called, so the returned
        iterator is unaffected by later refreshes. It can be consumed once.
        """
        titles = self.titles_for_tenant(tenant_id)
        needle = prefix.lower()
        return (title for title in titles if title.lower().startswith(needle))

    def entries(self) -> tuple[IndexEntry, ...]:
        return self._current().entries

    @property
    def is_loaded(self) -> bool:
        return self._current().refreshed_at is not None

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._current().refreshed_at

    def __len__(self) -> int:
        return len(self._current().entries)

    def close(self) -> None:
        """Mark the cache unavailable; later reads and refreshes raise."""
        self._closed = True
