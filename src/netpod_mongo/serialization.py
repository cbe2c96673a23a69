"""BSON result documents -> transport-safe JSON (ObjectId, datetime, Decimal128)."""

from __future__ import annotations

import base64
import json
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from bson import Decimal128, ObjectId, json_util

from .decoding import REFERENCE_FIELD
from .exceptions import StoreError


def _serialize_value(value: Any) -> Any:
    """Convert BSON types to JSON-safe types.

    ObjectId renders as the same single-field wrapper accepted in filters, so
    a value read from a result can be used to query again.
    """
    if isinstance(value, float) and not math.isfinite(value):
        # Extended JSON spelling; bare NaN/Infinity are not valid JSON.
        if math.isnan(value):
            return {"$numberDouble": "NaN"}
        return {"$numberDouble": "Infinity" if value > 0 else "-Infinity"}
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, ObjectId):
        return {REFERENCE_FIELD: str(value)}
    if isinstance(value, datetime):
        # The driver hands back naive datetimes that are UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    # Remaining BSON types (Timestamp, Regex, MinKey, ...) use extended JSON.
    return json_util.default(value)


def to_wire(value: Any) -> Any:
    """Return ``value`` with every BSON-specific type made JSON-safe."""
    try:
        return _serialize_value(value)
    except TypeError as e:
        raise StoreError(f"cannot encode result: {e}") from e


def dumps(value: Any) -> str:
    """Encode a result (document, list of documents, names) as JSON text."""
    return json.dumps(to_wire(value), allow_nan=False)
