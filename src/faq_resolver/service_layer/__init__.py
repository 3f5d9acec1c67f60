"""Service layer - use case orchestration.

Following Cosmic Python Chapter 4: the service layer works with the domain
model through the document store and keeps the title index in step with it.
"""

from .aliases import flatten_link_target, resolve_content
from .faq_service import AddOutcome, FaqService


__all__ = [
    "AddOutcome",
    "FaqService",
    "flatten_link_target",
    "resolve_content",
]
