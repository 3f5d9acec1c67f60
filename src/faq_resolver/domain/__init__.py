"""Domain layer - pure business logic with no infrastructure dependencies.

Contains the FAQ entry aggregate, the index entry value object, the
resolution outcome types, title normalization, and the error taxonomy.
"""

from faq_resolver.domain.errors import (
    BrokenAliasError,
    CacheUnavailableError,
    DuplicateTitleError,
    FaqError,
    LinkTargetNotFoundError,
    StoreError,
)
from faq_resolver.domain.model import (
    Approximate,
    Exact,
    FaqEntry,
    IndexEntry,
    NotFound,
    ResolutionResult,
    extract_lookup_key,
    normalize_title,
)


__all__ = [
    "Approximate",
    "BrokenAliasError",
    "CacheUnavailableError",
    "DuplicateTitleError",
    "Exact",
    "FaqEntry",
    "FaqError",
    "IndexEntry",
    "LinkTargetNotFoundError",
    "NotFound",
    "ResolutionResult",
    "StoreError",
    "extract_lookup_key",
    "normalize_title",
]
