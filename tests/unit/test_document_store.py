"""Contract tests for document store implementations.

Every test using the ``store`` fixture runs against both the in-memory
FakeDocumentStore and the SQLite store.
"""

from pathlib import Path
import sqlite3

import pytest

from faq_resolver.adapters.document_store import SqliteDocumentStore
from faq_resolver.domain.errors import DuplicateTitleError, StoreError
from faq_resolver.domain.model import FaqEntry, IndexEntry


@pytest.mark.unit
class TestDocumentStoreContract:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get(1, "Nothing") is None

    @pytest.mark.asyncio
    async def test_upsert_then_get_round_trips_all_fields(self, store):
        entry = FaqEntry.create_content(
            1, "Blueprint", "Use blueprints.", "https://img.example/bp.png", author_id=9, edit_time=1700000000
        )

        replaced = await store.upsert(entry)
        fetched = await store.get(1, "Blueprint")

        assert replaced is False
        assert fetched == entry

    @pytest.mark.asyncio
    async def test_upsert_replaces_without_duplicates(self, store):
        await store.upsert(FaqEntry.create_content(1, "Blueprint", "old", edit_time=1))
        replaced = await store.upsert(FaqEntry.create_content(1, "blueprint", "new", edit_time=2))

        fetched = await store.get(1, "Blueprint")
        titles = await store.get_all_titles()

        assert replaced is True
        assert fetched is not None
        assert fetched.content == "new"
        assert fetched.image_ref is None
        assert fetched.edit_time == 2
        assert titles == [IndexEntry(tenant_id=1, title="Blueprint")]

    @pytest.mark.asyncio
    async def test_upsert_replaces_alias_with_content(self, store):
        await store.upsert(FaqEntry.create_content(1, "Blueprint", "content", edit_time=1))
        await store.insert(FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1))

        await store.upsert(FaqEntry.create_content(1, "Bp", "own content", edit_time=2))

        fetched = await store.get(1, "Bp")
        assert fetched is not None
        assert fetched.alias_target is None
        assert fetched.content == "own content"

    @pytest.mark.asyncio
    async def test_titles_are_partitioned_by_tenant(self, store):
        await store.upsert(FaqEntry.create_content(1, "Belts", "a", edit_time=1))
        await store.upsert(FaqEntry.create_content(2, "Belts", "b", edit_time=1))

        first = await store.get(1, "Belts")
        second = await store.get(2, "Belts")

        assert first is not None and first.content == "a"
        assert second is not None and second.content == "b"
        assert await store.list_titles(1) == ["Belts"]

    @pytest.mark.asyncio
    async def test_insert_duplicate_raises(self, store):
        await store.insert(FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1))

        with pytest.raises(DuplicateTitleError) as exc_info:
            await store.insert(FaqEntry.create_alias(1, "bp", "Other", edit_time=1))

        assert exc_info.value.title == "Bp"
        fetched = await store.get(1, "Bp")
        assert fetched is not None
        assert fetched.alias_target == "Blueprint"

    @pytest.mark.asyncio
    async def test_delete_removes_entry_and_aliases(self, store):
        await store.upsert(FaqEntry.create_content(1, "Blueprint", "c", edit_time=1))
        await store.insert(FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1))
        await store.insert(FaqEntry.create_alias(1, "Bprint", "Blueprint", edit_time=1))
        await store.upsert(FaqEntry.create_content(1, "Belts", "c", edit_time=1))
        await store.insert(FaqEntry.create_alias(2, "Bp", "Blueprint", edit_time=1))

        removed = await store.delete(1, "Blueprint")

        assert removed == 3
        assert await store.list_titles(1) == ["Belts"]
        assert await store.list_titles(2) == ["Bp"]

    @pytest.mark.asyncio
    async def test_delete_alias_only(self, store):
        await store.upsert(FaqEntry.create_content(1, "Blueprint", "c", edit_time=1))
        await store.insert(FaqEntry.create_alias(1, "Bp", "Blueprint", edit_time=1))

        assert await store.delete(1, "Bp") == 1
        assert await store.list_titles(1) == ["Blueprint"]

    @pytest.mark.asyncio
    async def test_delete_missing_returns_zero(self, store):
        assert await store.delete(1, "Ghost") == 0

    @pytest.mark.asyncio
    async def test_list_titles_sorted(self, store):
        for title in ["Trains", "Belts", "Oil"]:
            await store.upsert(FaqEntry.create_content(1, title, "c", edit_time=1))

        assert await store.list_titles(1) == ["Belts", "Oil", "Trains"]
        assert await store.list_titles(99) == []

    @pytest.mark.asyncio
    async def test_get_all_titles_spans_tenants(self, store):
        await store.upsert(FaqEntry.create_content(1, "Belts", "c", edit_time=1))
        await store.upsert(FaqEntry.create_content(2, "Oil", "c", edit_time=1))

        titles = await store.get_all_titles()

        assert sorted(titles, key=lambda e: (e.tenant_id, e.title)) == [
            IndexEntry(tenant_id=1, title="Belts"),
            IndexEntry(tenant_id=2, title="Oil"),
        ]

    @pytest.mark.asyncio
    async def test_delete_tenant(self, store):
        await store.upsert(FaqEntry.create_content(1, "Belts", "c", edit_time=1))
        await store.insert(FaqEntry.create_alias(1, "B", "Belts", edit_time=1))
        await store.upsert(FaqEntry.create_content(2, "Oil", "c", edit_time=1))

        assert await store.delete_tenant(1) == 2
        assert await store.list_titles(1) == []
        assert await store.list_titles(2) == ["Oil"]


@pytest.mark.unit
class TestSqliteDocumentStore:
    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "faq.sqlite"
        first = SqliteDocumentStore(db_path)
        await first.upsert(FaqEntry.create_content(1, "Blueprint", "c", edit_time=1))

        second = SqliteDocumentStore(db_path)
        fetched = await second.get(1, "Blueprint")

        assert db_path.exists()
        assert fetched is not None
        assert fetched.content == "c"

    @pytest.mark.asyncio
    async def test_ensure_ready_creates_schema(self, tmp_path: Path):
        store = SqliteDocumentStore(tmp_path / "faq.sqlite")
        await store.ensure_ready()

        assert await store.get_all_titles() == []

    @pytest.mark.asyncio
    async def test_sqlite_errors_wrapped_as_store_error(self, tmp_path: Path):
        # A directory cannot be opened as a database file
        db_dir = tmp_path / "not-a-file"
        db_dir.mkdir()
        store = SqliteDocumentStore(db_dir)

        with pytest.raises(StoreError) as exc_info:
            await store.get(1, "Blueprint")

        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_corrupt_database_raises_store_error(self, tmp_path: Path):
        db_path = tmp_path / "faq.sqlite"
        db_path.write_bytes(b"this is not a sqlite database" * 100)
        store = SqliteDocumentStore(db_path)

        with pytest.raises(StoreError):
            await store.get_all_titles()

    @pytest.mark.asyncio
    async def test_invalid_row_raises_store_error(self, tmp_path: Path):
        db_path = tmp_path / "faq.sqlite"
        store = SqliteDocumentStore(db_path)
        await store.ensure_ready()
        with sqlite3.connect(db_path) as conn:
            conn.execute("INSERT INTO faq (server_id, title, contents) VALUES (1, '   ', 'orphan')")
        conn.close()

        with pytest.raises(StoreError) as exc_info:
            await store.get(1, "   ")

        assert isinstance(exc_info.value.__cause__, ValueError)
