"""Alias handling: single-hop dereference at read time, flattening at write time.

Alias chains are collapsed to depth one when a link is written, so reading
never needs more than one extra lookup and can never cycle.
"""

import logging

from faq_resolver.adapters.document_store import AbstractDocumentStore
from faq_resolver.domain.errors import BrokenAliasError, LinkTargetNotFoundError
from faq_resolver.domain.model import FaqEntry


logger = logging.getLogger(__name__)


async def resolve_content(store: AbstractDocumentStore, entry: FaqEntry) -> FaqEntry:
    """Return the content-bearing entry for ``entry``.

    Non-alias entries are returned unchanged. An alias costs exactly one store
    lookup; a missing target raises BrokenAliasError.
    """
    if entry.alias_target is None:
        return entry

    target = await store.get(entry.tenant_id, entry.alias_target)
    if target is None:
        logger.error(
            "Alias %r in tenant %s points at missing entry %r",
            entry.title,
            entry.tenant_id,
            entry.alias_target,
        )
        raise BrokenAliasError(entry.tenant_id, entry.title, entry.alias_target)
    return target


async def flatten_link_target(store: AbstractDocumentStore, tenant_id: int, target_title: str) -> str:
    """Return the title a new alias to ``target_title`` should store.

    If the target is itself an alias, its own target is used instead.

    Raises:
        LinkTargetNotFoundError: ``target_title`` does not exist
    """
    target = await store.get(tenant_id, target_title)
    if target is None:
        raise LinkTargetNotFoundError(tenant_id, target_title)
    return target.alias_target if target.alias_target is not None else target.title
