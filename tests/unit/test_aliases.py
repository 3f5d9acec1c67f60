"""Unit tests for alias dereferencing and link flattening."""

import pytest

from faq_resolver.domain.errors import BrokenAliasError, LinkTargetNotFoundError
from faq_resolver.domain.model import FaqEntry
from faq_resolver.service_layer.aliases import flatten_link_target, resolve_content


class CountingStore:
    """Wraps a store and counts ``get`` calls."""

    def __init__(self, inner):
        self.inner = inner
        self.gets = 0

    async def get(self, tenant_id, title):
        self.gets += 1
        return await self.inner.get(tenant_id, title)


@pytest.mark.unit
class TestResolveContent:
    @pytest.mark.asyncio
    async def test_content_entry_returned_unchanged(self, store, blueprint_entry):
        counting = CountingStore(store)

        assert await resolve_content(counting, blueprint_entry) is blueprint_entry
        assert counting.gets == 0

    @pytest.mark.asyncio
    async def test_alias_costs_one_lookup(self, store, blueprint_entry):
        await store.upsert(blueprint_entry)
        alias = FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1)
        counting = CountingStore(store)

        resolved = await resolve_content(counting, alias)

        assert resolved == blueprint_entry
        assert counting.gets == 1

    @pytest.mark.asyncio
    async def test_alias_lookup_stays_in_tenant(self, store, blueprint_entry):
        await store.upsert(blueprint_entry)
        alias = FaqEntry.create_alias(2, "Bp", "Blueprint", edit_time=1)

        with pytest.raises(BrokenAliasError):
            await resolve_content(store, alias)

    @pytest.mark.asyncio
    async def test_broken_alias_raises(self, store):
        alias = FaqEntry.create_alias(1, "X", "Ghost", edit_time=1)

        with pytest.raises(BrokenAliasError) as exc_info:
            await resolve_content(store, alias)

        assert exc_info.value.tenant_id == 1
        assert exc_info.value.title == "X"
        assert exc_info.value.alias_target == "Ghost"


@pytest.mark.unit
class TestFlattenLinkTarget:
    @pytest.mark.asyncio
    async def test_content_target_kept(self, store, blueprint_entry):
        await store.upsert(blueprint_entry)

        assert await flatten_link_target(store, 1, "Blueprint") == "Blueprint"

    @pytest.mark.asyncio
    async def test_alias_target_collapsed(self, store, blueprint_entry):
        await store.upsert(blueprint_entry)
        await store.insert(FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1))

        assert await flatten_link_target(store, 1, "Bp") == "Blueprint"

    @pytest.mark.asyncio
    async def test_missing_target_raises(self, store):
        with pytest.raises(LinkTargetNotFoundError) as exc_info:
            await flatten_link_target(store, 1, "Ghost")

        assert exc_info.value.title == "Ghost"
