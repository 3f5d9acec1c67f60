"""FAQ resolution engine: exact, fuzzy, and alias-aware lookup of per-tenant FAQ entries."""

from faq_resolver.bootstrap import create_faq_service
from faq_resolver.config import Settings
from faq_resolver.domain import (
    Approximate,
    BrokenAliasError,
    CacheUnavailableError,
    DuplicateTitleError,
    Exact,
    FaqEntry,
    FaqError,
    LinkTargetNotFoundError,
    NotFound,
    ResolutionResult,
    StoreError,
    normalize_title,
)
from faq_resolver.service_layer import AddOutcome, FaqService


__version__ = "0.1.0"

__all__ = [
    "AddOutcome",
    "Approximate",
    "BrokenAliasError",
    "CacheUnavailableError",
    "DuplicateTitleError",
    "Exact",
    "FaqEntry",
    "FaqError",
    "FaqService",
    "LinkTargetNotFoundError",
    "NotFound",
    "ResolutionResult",
    "Settings",
    "StoreError",
    "create_faq_service",
    "normalize_title",
]
