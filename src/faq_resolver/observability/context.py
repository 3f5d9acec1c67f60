"""Context propagation for log correlation across async boundaries."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


request_context: ContextVar[dict | None] = ContextVar("request_context", default=None)


def generate_request_id() -> str:
    """Generate a 16-char hex request ID."""
    return uuid4().hex[:16]


def get_request_context() -> dict:
    """Get the current request context, creating an ID on first use."""
    ctx = request_context.get()
    if ctx is None or not ctx.get("request_id"):
        ctx = {"request_id": generate_request_id()}
        request_context.set(ctx)
    return ctx


def set_request_context(request_id: str, **extra: object) -> None:
    """Set request context for the current async context."""
    request_context.set({"request_id": request_id, **extra})


@contextmanager
def tenant_scope(tenant_id: int) -> Generator[dict, None, None]:
    """Attach ``tenant_id`` to the context for the duration of the block."""
    ctx = get_request_context()
    token = request_context.set({**ctx, "tenant": tenant_id})
    try:
        yield request_context.get() or {}
    finally:
        request_context.reset(token)
