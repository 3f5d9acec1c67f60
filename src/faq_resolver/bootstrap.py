"""Composition root: wire settings, logging, store, cache, and service."""

import logging

from faq_resolver.adapters.document_store import AbstractDocumentStore, SqliteDocumentStore
from faq_resolver.config import Settings
from faq_resolver.observability.logging import configure_logging
from faq_resolver.observability.tracing import init_tracing
from faq_resolver.search.title_index import TitleIndexCache
from faq_resolver.service_layer.faq_service import FaqService


logger = logging.getLogger(__name__)


def create_faq_service(
    settings: Settings | None = None,
    *,
    store: AbstractDocumentStore | None = None,
    setup_logging: bool = False,
) -> FaqService:
    """Build a FaqService with its own store and title index cache.

    The cache is created here and shared only through the returned service.
    Call ``await service.start()`` to load the index before serving.
    """
    settings = settings or Settings()

    if setup_logging:
        configure_logging(settings.log_level, json_output=settings.log_json)
    if settings.tracing_enabled:
        init_tracing(service_name=settings.service_name)

    if store is None:
        store = SqliteDocumentStore(settings.database_path, busy_timeout_ms=settings.busy_timeout_ms)
        logger.info("Using SQLite FAQ store at %s", settings.database_path)

    cache = TitleIndexCache(lock_timeout=settings.cache_lock_timeout)
    return FaqService(store=store, cache=cache, settings=settings)
