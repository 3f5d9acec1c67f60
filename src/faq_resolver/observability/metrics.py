"""Prometheus metrics for FAQ resolution."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


RESOLUTION_COUNT = Counter(
    "faq_resolutions_total",
    "FAQ resolutions by outcome",
    ["outcome"],
)

RESOLUTION_LATENCY = Histogram(
    "faq_resolution_latency_seconds",
    "FAQ resolution latency in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

CACHE_REFRESH_COUNT = Counter(
    "faq_cache_refreshes_total",
    "Title index cache refreshes",
    ["status"],
)

CACHE_ENTRIES = Gauge(
    "faq_cache_entries",
    "Number of (tenant, title) pairs in the title index cache",
)


@contextmanager
def track_latency(histogram: Histogram) -> Generator[None, None, None]:
    """Observe the wall time of the block on ``histogram``."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Render all registered metrics in Prometheus text format."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
