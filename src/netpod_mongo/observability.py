"""InvocationLogger: one JSON log entry per pod invocation."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .correlation import get_invocation_id
from .exceptions import NetpodMongoError

_log = logging.getLogger("netpod_mongo.invocations")

R = TypeVar("R")


class InvocationLogger:
    """Emits JSON log entries with kind, var, outcome, duration."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or _log

    async def __call__(self, var: str, call: Callable[[], Awaitable[R]]) -> R:
        start = time.monotonic()
        outcome = "success"
        error_kind: str | None = None
        try:
            return await call()
        except NetpodMongoError as e:
            outcome = "error"
            error_kind = e.kind
            raise
        except BaseException:
            outcome = "error"
            raise
        finally:
            entry: dict[str, Any] = {
                "kind": "invocation",
                "var": var,
                "outcome": outcome,
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
                "invocation_id": get_invocation_id(),
            }
            if error_kind is not None:
                entry["error_kind"] = error_kind
            self._log.info(json.dumps(entry))
