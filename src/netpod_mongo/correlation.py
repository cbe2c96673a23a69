"""Invocation id tracking across async boundaries."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_invocation_id: ContextVar[str | None] = ContextVar("invocation_id", default=None)


def get_invocation_id() -> str | None:
    """Get current invocation ID from context."""
    return _invocation_id.get()


def set_invocation_id(invocation_id: str | None) -> None:
    """Set invocation ID in context."""
    _invocation_id.set(invocation_id)


def generate_invocation_id() -> str:
    return str(uuid.uuid4())
