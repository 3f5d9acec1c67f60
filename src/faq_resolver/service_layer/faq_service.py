"""FAQ resolution service - the end-to-end "name to content" use case.

Orchestrates the document store, the title index cache, the fuzzy matcher
and alias handling:

1. Normalize the raw name into a lookup key
2. Exact lookup in the store
3. On miss, fuzzy match against the tenant's cached titles
4. Dereference one alias hop
5. Tag the result Exact or Approximate by how the *title* was found

Also exposes autocomplete suggestions and the mutating operations (add,
remove, link, purge), each of which refreshes the title index afterwards.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass
import logging

from faq_resolver.adapters.document_store import AbstractDocumentStore
from faq_resolver.config import Settings
from faq_resolver.domain.errors import DuplicateTitleError
from faq_resolver.domain.model import (
    Approximate,
    Exact,
    FaqEntry,
    NotFound,
    ResolutionResult,
    extract_lookup_key,
    normalize_title,
)
from faq_resolver.observability.context import tenant_scope
from faq_resolver.observability.metrics import RESOLUTION_COUNT, RESOLUTION_LATENCY, track_latency
from faq_resolver.observability.tracing import create_span
from faq_resolver.search.fuzzy import best_match, rank_matches
from faq_resolver.search.title_index import TitleIndexCache
from faq_resolver.service_layer.aliases import flatten_link_target, resolve_content


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddOutcome:
    """Result of ``FaqService.add_entry``."""

    entry: FaqEntry
    replaced: bool


class FaqService:
    """Resolve, suggest, and edit FAQ entries for many tenants.

    The store and the title index cache are injected by the composition root;
    the service owns neither globally.
    """

    def __init__(
        self,
        store: AbstractDocumentStore,
        cache: TitleIndexCache,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.settings = settings or Settings()
        self._background_refresh: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Load the title index (startup)."""
        await self.refresh_cache()

    async def close(self) -> None:
        """Cancel background work and release the cache and the store."""
        task = self._background_refresh
        self._background_refresh = None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self.cache.close()
        await self.store.close()

    async def refresh_cache(self) -> int:
        """Rebuild the title index from the store."""
        return await self.cache.refresh(self.store)

    # Resolution
    async def resolve(self, tenant_id: int, raw_name: str) -> ResolutionResult:
        """Resolve ``raw_name`` within ``tenant_id`` to a content-bearing entry.

        Raises:
            StoreError: the store failed; not retried here
            BrokenAliasError: the matched alias points at a missing entry
            CacheUnavailableError: the title index could not be read
        """
        key = extract_lookup_key(raw_name, self.settings.lookup_separator)

        with (
            tenant_scope(tenant_id),
            track_latency(RESOLUTION_LATENCY),
            create_span("faq.resolve", attributes={"faq.tenant_id": tenant_id, "faq.key": key}) as span,
        ):
            result = await self._resolve_key(tenant_id, key)
            outcome = type(result).__name__.lower()
            span.set_attribute("faq.outcome", outcome)
            RESOLUTION_COUNT.labels(outcome=outcome).inc()
            return result

    async def _resolve_key(self, tenant_id: int, key: str) -> ResolutionResult:
        if not key:
            return NotFound(query=key)

        entry = await self.store.get(tenant_id, key)
        if entry is not None:
            return Exact(entry=await resolve_content(self.store, entry))

        match = best_match(key, self.cache.titles_for_tenant(tenant_id), self.settings.fuzzy_threshold)
        if match is None:
            logger.debug("No FAQ entry close to %r in tenant %s", key, tenant_id)
            return NotFound(query=key)

        entry = await self.store.get(tenant_id, match.title)
        if entry is None:
            logger.warning(
                "Title index is stale: %r in tenant %s is cached but not stored; refreshing",
                match.title,
                tenant_id,
            )
            self._schedule_background_refresh()
            return NotFound(query=key)

        logger.debug("Resolved %r to %r (score %.3f) in tenant %s", key, match.title, match.score, tenant_id)
        return Approximate(entry=await resolve_content(self.store, entry), matched_title=match.title)

    def _schedule_background_refresh(self) -> None:
        if self._background_refresh is not None and not self._background_refresh.done():
            return
        task = asyncio.create_task(self.refresh_cache())
        task.add_done_callback(self._on_background_refresh_complete)
        self._background_refresh = task

    def _on_background_refresh_complete(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background title index refresh failed: %s", exc, exc_info=exc)

    # Autocomplete
    def suggest(self, tenant_id: int, prefix: str, limit: int | None = None) -> list[str]:
        """Titles of ``tenant_id`` starting with ``prefix``, from the cache only."""
        max_items = limit if limit is not None else self.settings.suggestion_limit
        if max_items <= 0:
            return []

        suggestions: list[str] = []
        for title in self.cache.lookup_by_prefix(tenant_id, prefix.lstrip()):
            suggestions.append(title)
            if len(suggestions) >= max_items:
                break
        return suggestions

    def similar_titles(self, tenant_id: int, raw_name: str, limit: int = 5) -> list[str]:
        """Cached titles close to ``raw_name``, best first, for "did you mean" replies."""
        key = extract_lookup_key(raw_name, self.settings.lookup_separator)
        if not key:
            return []
        matches = rank_matches(key, self.cache.titles_for_tenant(tenant_id), limit, self.settings.fuzzy_threshold)
        return [match.title for match in matches]

    async def list_titles(self, tenant_id: int) -> list[str]:
        """All titles of a tenant, sorted, read from the store."""
        return await self.store.list_titles(tenant_id)

    # Mutations
    async def add_entry(
        self,
        tenant_id: int,
        name: str,
        content: str | None = None,
        image_ref: str | None = None,
        *,
        author_id: int | None = None,
        edit_time: int | None = None,
    ) -> AddOutcome:
        """Create or replace a content entry."""
        entry = FaqEntry.create_content(
            tenant_id,
            name,
            content,
            image_ref,
            author_id=author_id,
            edit_time=edit_time,
        )
        replaced = await self.store.upsert(entry)
        logger.info("%s FAQ entry %r in tenant %s", "Edited" if replaced else "Added", entry.title, tenant_id)
        await self.refresh_cache()
        return AddOutcome(entry=entry, replaced=replaced)

    async def remove_entry(self, tenant_id: int, name: str) -> int:
        """Remove an entry and every alias pointing at it.

        Returns:
            Number of entries removed (0 if the entry did not exist)
        """
        title = normalize_title(name)
        removed = await self.store.delete(tenant_id, title)
        if removed:
            logger.info("Removed FAQ entry %r and its aliases (%d rows) in tenant %s", title, removed, tenant_id)
            await self.refresh_cache()
        else:
            logger.info("FAQ entry %r does not exist in tenant %s", title, tenant_id)
        return removed

    async def link_entry(
        self,
        tenant_id: int,
        name: str,
        link_to: str,
        *,
        author_id: int | None = None,
        edit_time: int | None = None,
    ) -> FaqEntry:
        """Create alias ``name`` pointing at ``link_to``'s final target.

        Raises:
            DuplicateTitleError: ``name`` already exists
            LinkTargetNotFoundError: ``link_to`` does not exist
        """
        title = normalize_title(name)
        if await self.store.get(tenant_id, title) is not None:
            raise DuplicateTitleError(tenant_id, title)

        target = await flatten_link_target(self.store, tenant_id, normalize_title(link_to))
        alias = FaqEntry.create_alias(tenant_id, title, target, author_id=author_id, edit_time=edit_time)
        await self.store.insert(alias)
        logger.info("FAQ link %r added in tenant %s, linking to %r", alias.title, tenant_id, target)
        await self.refresh_cache()
        return alias

    async def purge_tenant(self, tenant_id: int) -> int:
        """Delete all entries of a tenant (e.g. the server was left)."""
        removed = await self.store.delete_tenant(tenant_id)
        logger.info("Purged %d FAQ entries for tenant %s", removed, tenant_id)
        await self.refresh_cache()
        return removed
