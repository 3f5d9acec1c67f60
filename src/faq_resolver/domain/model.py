"""Domain model - FAQ entries, index entries, and resolution outcomes.

Following Cosmic Python principles:
- Domain model has NO dependencies on infrastructure
- Entities have identity (tenant + title) and can change over time
- Value objects are immutable and defined by their attributes
- Uses Pydantic dataclasses for validation at construction

Title normalization lives here because it is part of the entry's identity:
every write and every read goes through ``normalize_title`` so that lookups
are case-insensitive from the caller's point of view.
"""

from dataclasses import dataclass as std_dataclass
from datetime import datetime, timezone
from typing import Self

from pydantic import Field
from pydantic.dataclasses import dataclass


def normalize_title(raw: str) -> str:
    """Normalize a user-supplied name into the stored title form.

    Strips surrounding whitespace, lowercases everything and uppercases the
    first character. Applying it twice yields the same result as once.

    Examples:
        >>> normalize_title("  bLUEPRINT ")
        'Blueprint'
        >>> normalize_title("train stop")
        'Train stop'
        >>> normalize_title("ŉa")
        'ʼna'
    """
    title = raw.strip().capitalize()
    # Some title-case mappings expand to several characters ("ŉ" -> "ʼN")
    return title[:1] + title[1:].lower()


def extract_lookup_key(raw: str, separator: str | None) -> str:
    """Return the normalized lookup key for a compound input string.

    Only the segment before the first ``separator`` is used; anything after it
    is auxiliary text appended by the caller.
    """
    if separator and separator in raw:
        raw = raw.split(separator, 1)[0]
    return normalize_title(raw)


def _now_timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())


@dataclass
class FaqEntry:
    """Aggregate root for a stored FAQ document.

    Identity is ``(tenant_id, title)``. An entry either carries content
    (``content`` / ``image_ref``) or points at another entry of the same
    tenant through ``alias_target``. The model does not hard-enforce that the
    two are exclusive.
    """

    tenant_id: int
    title: str = Field(min_length=1)
    content: str | None = None
    image_ref: str | None = None
    alias_target: str | None = None
    edit_time: int | None = None
    author_id: int | None = None

    def __post_init__(self) -> None:
        """Normalize title and alias target after Pydantic validation."""
        title = normalize_title(self.title)
        if not title:
            raise ValueError("FAQ entry must have a non-empty title")
        object.__setattr__(self, "title", title)

        if self.alias_target is not None:
            target = normalize_title(self.alias_target)
            object.__setattr__(self, "alias_target", target or None)

    @property
    def is_alias(self) -> bool:
        return self.alias_target is not None

    @property
    def key(self) -> tuple[int, str]:
        return (self.tenant_id, self.title)

    def to_index_entry(self) -> "IndexEntry":
        return IndexEntry(tenant_id=self.tenant_id, title=self.title)

    @classmethod
    def create_content(
        cls,
        tenant_id: int,
        title: str,
        content: str | None = None,
        image_ref: str | None = None,
        *,
        author_id: int | None = None,
        edit_time: int | None = None,
    ) -> Self:
        """Factory for a content-bearing entry."""
        return cls(
            tenant_id=tenant_id,
            title=title,
            content=content,
            image_ref=image_ref,
            edit_time=edit_time if edit_time is not None else _now_timestamp(),
            author_id=author_id,
        )

    @classmethod
    def create_alias(
        cls,
        tenant_id: int,
        title: str,
        alias_target: str,
        *,
        author_id: int | None = None,
        edit_time: int | None = None,
    ) -> Self:
        """Factory for an alias entry pointing at ``alias_target``."""
        return cls(
            tenant_id=tenant_id,
            title=title,
            alias_target=alias_target,
            edit_time=edit_time if edit_time is not None else _now_timestamp(),
            author_id=author_id,
        )


@std_dataclass(frozen=True, slots=True)
class IndexEntry:
    """Lightweight ``(tenant_id, title)`` pair held by the title index cache."""

    tenant_id: int
    title: str


# Resolution outcomes (value objects)
@std_dataclass(frozen=True, slots=True)
class Exact:
    """The normalized name matched a stored title directly."""

    entry: FaqEntry

    found = True
    exact = True


@std_dataclass(frozen=True, slots=True)
class Approximate:
    """No exact title; the fuzzy matcher picked ``matched_title`` instead.

    ``entry`` is the final content-bearing record. When the matched title is
    an alias, ``matched_title`` still names the alias.
    """

    entry: FaqEntry
    matched_title: str

    found = True
    exact = False


@std_dataclass(frozen=True, slots=True)
class NotFound:
    """Neither exact nor fuzzy resolution succeeded for ``query``."""

    query: str

    found = False
    exact = False


ResolutionResult = Exact | Approximate | NotFound
