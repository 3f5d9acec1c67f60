"""Document store implementations for FAQ entries.

Following Cosmic Python Chapter 2 (Repository Pattern): the resolution engine
only talks to ``AbstractDocumentStore``. ``SqliteDocumentStore`` persists
entries in a single SQLite table; ``FakeDocumentStore`` keeps them in memory
for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from collections.abc import Callable
from contextlib import closing
import logging
from pathlib import Path
import sqlite3
from typing import Any, TypeVar

from faq_resolver.domain.errors import DuplicateTitleError, StoreError
from faq_resolver.domain.model import FaqEntry, IndexEntry


logger = logging.getLogger(__name__)

T = TypeVar("T")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS faq (
    server_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    contents TEXT,
    image TEXT,
    link TEXT,
    edit_time INTEGER,
    author INTEGER,
    PRIMARY KEY (server_id, title)
);
CREATE INDEX IF NOT EXISTS idx_faq_server_link ON faq (server_id, link);
"""

_ENTRY_COLUMNS = "server_id, title, contents, image, link, edit_time, author"


def _row_to_entry(row: sqlite3.Row) -> FaqEntry:
    try:
        return FaqEntry(
            tenant_id=row["server_id"],
            title=row["title"],
            content=row["contents"],
            image_ref=row["image"],
            alias_target=row["link"],
            edit_time=row["edit_time"],
            author_id=row["author"],
        )
    except ValueError as exc:
        # pydantic ValidationError is a ValueError
        raise StoreError(f"Corrupt FAQ row for tenant {row['server_id']}: {exc}") from exc


def _entry_params(entry: FaqEntry) -> tuple[Any, ...]:
    return (
        entry.tenant_id,
        entry.title,
        entry.content,
        entry.image_ref,
        entry.alias_target,
        entry.edit_time,
        entry.author_id,
    )


class AbstractDocumentStore(ABC):
    """Abstract store for the FaqEntry aggregate."""

    @abstractmethod
    async def get(self, tenant_id: int, title: str) -> FaqEntry | None:
        """Get an entry by its normalized title."""
        raise NotImplementedError

    @abstractmethod
    async def get_all_titles(self) -> list[IndexEntry]:
        """Return every ``(tenant_id, title)`` pair across all tenants."""
        raise NotImplementedError

    @abstractmethod
    async def list_titles(self, tenant_id: int) -> list[str]:
        """Return all titles of one tenant, sorted."""
        raise NotImplementedError

    @abstractmethod
    async def upsert(self, entry: FaqEntry) -> bool:
        """Replace any entry with the same key, then insert ``entry``.

        Returns:
            True if an existing entry was replaced, False if newly inserted
        """
        raise NotImplementedError

    @abstractmethod
    async def insert(self, entry: FaqEntry) -> None:
        """Insert ``entry``; raise DuplicateTitleError if the key exists."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, tenant_id: int, title_or_alias_target: str) -> int:
        """Delete the entry with this title and every alias pointing at it.

        Returns:
            Number of entries removed (0 if nothing matched)
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_tenant(self, tenant_id: int) -> int:
        """Delete all entries of a tenant and return how many were removed."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release resources held by the store."""
        return None


class SqliteDocumentStore(AbstractDocumentStore):
    """SQLite-backed document store.

    Every operation opens its own connection inside a worker thread and runs
    in a single transaction, so per-row changes are atomic. ``sqlite3.Error``
    is wrapped in ``StoreError``.
    """

    def __init__(self, db_path: Path, *, busy_timeout_ms: int = 30000) -> None:
        self.db_path = Path(db_path).expanduser()
        self.busy_timeout_ms = busy_timeout_ms
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")
        return conn

    def _initialize_schema(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.executescript(_SCHEMA)
        self._initialized = True
        logger.debug("FAQ schema ready at %s", self.db_path)

    def _guarded(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        try:
            if not self._initialized:
                self._initialize_schema()
            with closing(self._connect()) as conn, conn:
                return operation(conn)
        except sqlite3.Error as exc:
            raise StoreError(f"FAQ store operation failed on {self.db_path}: {exc}") from exc

    async def _run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        return await asyncio.to_thread(self._guarded, operation)

    async def ensure_ready(self) -> None:
        """Create the database file and schema if missing."""
        await self._run(lambda conn: None)

    async def get(self, tenant_id: int, title: str) -> FaqEntry | None:
        def _get(conn: sqlite3.Connection) -> FaqEntry | None:
            row = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM faq WHERE server_id = ? AND title = ?",
                (tenant_id, title),
            ).fetchone()
            return _row_to_entry(row) if row else None

        return await self._run(_get)

    async def get_all_titles(self) -> list[IndexEntry]:
        def _all(conn: sqlite3.Connection) -> list[IndexEntry]:
            rows = conn.execute("SELECT server_id, title FROM faq").fetchall()
            return [IndexEntry(tenant_id=row["server_id"], title=row["title"]) for row in rows]

        return await self._run(_all)

    async def list_titles(self, tenant_id: int) -> list[str]:
        def _list(conn: sqlite3.Connection) -> list[str]:
            rows = conn.execute("SELECT title FROM faq WHERE server_id = ? ORDER BY title", (tenant_id,)).fetchall()
            return [row["title"] for row in rows]

        return await self._run(_list)

    async def upsert(self, entry: FaqEntry) -> bool:
        def _upsert(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute(
                "DELETE FROM faq WHERE server_id = ? AND title = ?",
                (entry.tenant_id, entry.title),
            )
            conn.execute(
                f"INSERT INTO faq ({_ENTRY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                _entry_params(entry),
            )
            return cursor.rowcount > 0

        return await self._run(_upsert)

    async def insert(self, entry: FaqEntry) -> None:
        def _insert(conn: sqlite3.Connection) -> None:
            try:
                conn.execute(
                    f"INSERT INTO faq ({_ENTRY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    _entry_params(entry),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateTitleError(entry.tenant_id, entry.title) from exc

        await self._run(_insert)

    async def delete(self, tenant_id: int, title_or_alias_target: str) -> int:
        def _delete(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "DELETE FROM faq WHERE server_id = ? AND (title = ? OR link = ?)",
                (tenant_id, title_or_alias_target, title_or_alias_target),
            )
            return cursor.rowcount

        return await self._run(_delete)

    async def delete_tenant(self, tenant_id: int) -> int:
        def _delete_tenant(conn: sqlite3.Connection) -> int:
            return conn.execute("DELETE FROM faq WHERE server_id = ?", (tenant_id,)).rowcount

        return await self._run(_delete_tenant)


class FakeDocumentStore(AbstractDocumentStore):
    """In-memory document store for testing.

    Preserves insertion order, and an upsert moves the key to the end, the
    same observable order a delete-then-insert gives in SQLite.
    """

    def __init__(self, entries: list[FaqEntry] | None = None) -> None:
        self._entries: dict[tuple[int, str], FaqEntry] = {}
        for entry in entries or []:
            self._entries[entry.key] = entry

    async def get(self, tenant_id: int, title: str) -> FaqEntry | None:
        return self._entries.get((tenant_id, title))

    async def get_all_titles(self) -> list[IndexEntry]:
        return [entry.to_index_entry() for entry in self._entries.values()]

    async def list_titles(self, tenant_id: int) -> list[str]:
        return sorted(title for (owner, title) in self._entries if owner == tenant_id)

    async def upsert(self, entry: FaqEntry) -> bool:
        replaced = self._entries.pop(entry.key, None) is not None
        self._entries[entry.key] = entry
        return replaced

    async def insert(self, entry: FaqEntry) -> None:
        if entry.key in self._entries:
            raise DuplicateTitleError(entry.tenant_id, entry.title)
        self._entries[entry.key] = entry

    async def delete(self, tenant_id: int, title_or_alias_target: str) -> int:
        doomed = [
            entry.key
            for entry in self._entries.values()
            if entry.tenant_id == tenant_id and title_or_alias_target in (entry.title, entry.alias_target)
        ]
        for entry_key in doomed:
            del self._entries[entry_key]
        return len(doomed)

    async def delete_tenant(self, tenant_id: int) -> int:
        doomed = [entry_key for entry_key in self._entries if entry_key[0] == tenant_id]
        for entry_key in doomed:
            del self._entries[entry_key]
        return len(doomed)
