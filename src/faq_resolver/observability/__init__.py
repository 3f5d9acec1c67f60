"""Observability module: structured logging, tracing, and metrics."""

from faq_resolver.observability.context import get_request_context, set_request_context, tenant_scope
from faq_resolver.observability.logging import JsonFormatter, configure_logging
from faq_resolver.observability.metrics import (
    CACHE_ENTRIES,
    CACHE_REFRESH_COUNT,
    RESOLUTION_COUNT,
    RESOLUTION_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from faq_resolver.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "CACHE_ENTRIES",
    "CACHE_REFRESH_COUNT",
    "RESOLUTION_COUNT",
    "RESOLUTION_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_request_context",
    "get_tracer",
    "init_tracing",
    "set_request_context",
    "tenant_scope",
    "track_latency",
]
