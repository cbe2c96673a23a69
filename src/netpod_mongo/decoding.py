"""Decode loosely-typed JSON arguments into typed filter tuples.

Filter values arrive untyped. A value is an object reference when it is a
single-field wrapper such as ``{"ObjectId": "65a1f0c2e4b0a1b2c3d4e5f6"}``
holding valid 24-character hex; anything else is kept as a plain JSON value.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from bson import ObjectId

from .exceptions import ArgumentError, DecodeError

REFERENCE_FIELD = "ObjectId"

RawJSON = Union[str, bytes, bytearray]


@dataclass(frozen=True)
class Reference:
    """A decoded object reference."""

    oid: ObjectId

    def to_bson(self) -> ObjectId:
        return self.oid


@dataclass(frozen=True)
class Value:
    """Any other decoded JSON value, kept as-is."""

    raw: Any

    def to_bson(self) -> Any:
        return self.raw


DecodedValue = Union[Reference, Value]


def _reference_candidate(token: Any) -> str | None:
    if not isinstance(token, Mapping) or len(token) != 1:
        return None
    ((field, candidate),) = token.items()
    if not isinstance(field, str) or field.lower() != REFERENCE_FIELD.lower():
        return None
    return candidate if isinstance(candidate, str) else None


def _check_json_shape(token: Any, path: str = "$") -> None:
    """Raise DecodeError unless ``token`` is built only from JSON types."""
    if token is None or isinstance(token, (str, bool, int)):
        return
    if isinstance(token, float):
        if not math.isfinite(token):
            raise DecodeError(f"{path}: {token!r} is not a valid JSON number")
        return
    if isinstance(token, (list, tuple)):
        for i, item in enumerate(token):
            _check_json_shape(item, f"{path}[{i}]")
        return
    if isinstance(token, Mapping):
        for key, item in token.items():
            if not isinstance(key, str):
                raise DecodeError(f"{path}: object key {key!r} is not a string")
            _check_json_shape(item, f"{path}.{key}")
        return
    raise DecodeError(f"{path}: {type(token).__name__} is not a JSON value")


def decode_value(token: Any) -> DecodedValue:
    """Decode a single JSON token into a :class:`Reference` or :class:`Value`.

    The reference interpretation is tried first; a wrapper whose hex is
    malformed or of the wrong length falls back to a plain value.
    """
    candidate = _reference_candidate(token)
    if candidate is not None and ObjectId.is_valid(candidate):
        return Reference(ObjectId(candidate))
    _check_json_shape(token)
    return Value(token)


@dataclass(frozen=True)
class FilterTuple:
    """A single ``(key, value)`` equality predicate."""

    key: str
    value: DecodedValue

    @classmethod
    def from_json(cls, token: Any) -> FilterTuple:
        if not isinstance(token, (list, tuple)):
            raise DecodeError(
                f"filter tuple must be an array but got {type(token).__name__}"
            )
        if len(token) != 2:
            raise DecodeError(
                f"filter tuple must have 2 values but got {len(token)}"
            )
        key, raw_value = token
        if not isinstance(key, str):
            raise DecodeError(
                f"filter tuple key must be a string but got {type(key).__name__}"
            )
        return cls(key, decode_value(raw_value))


@dataclass(frozen=True)
class FilterSet:
    """Ordered, read-only sequence of filter tuples."""

    tuples: tuple[FilterTuple, ...] = ()

    def __iter__(self) -> Iterator[FilterTuple]:
        return iter(self.tuples)

    def __len__(self) -> int:
        return len(self.tuples)

    def to_filter(self) -> dict[str, Any]:
        """Build the driver filter document, preserving tuple order."""
        return {t.key: t.value.to_bson() for t in self.tuples}


def decode_filters(token: Any) -> FilterSet:
    """Decode a JSON array of ``[key, value]`` tuples into a FilterSet."""
    if not isinstance(token, (list, tuple)):
        raise DecodeError(f"filters must be an array but got {type(token).__name__}")
    tuples = tuple(FilterTuple.from_json(item) for item in token)
    seen: set[str] = set()
    for t in tuples:
        # A filter document cannot hold the same field twice.
        if t.key in seen:
            raise DecodeError(f"filter key {t.key!r} appears more than once")
        seen.add(t.key)
    return FilterSet(tuples)


# ── Positional argument decoding ─────────────────────────────────


def parse_json(raw: RawJSON, name: str = "argument") -> Any:
    """Parse raw JSON text."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"{name} is not valid JSON: {e}") from e


def decode_args(raw: RawJSON | Sequence[Any]) -> list[Any]:
    """Return the positional argument tokens of an invocation.

    Accepts either the JSON text of the argument array or an already
    decoded array.
    """
    args = raw
    if isinstance(raw, (str, bytes, bytearray)):
        args = parse_json(raw, "args")
    if not isinstance(args, (list, tuple)):
        raise DecodeError(f"args must be an array but got {type(args).__name__}")
    return list(args)


def check_arity(var: str, args: Sequence[Any], *allowed: int) -> None:
    if len(args) not in allowed:
        raise ArgumentError(var, allowed, len(args))


def decode_string(token: Any, name: str) -> str:
    if not isinstance(token, str):
        raise DecodeError(f"{name} must be a string but got {type(token).__name__}")
    return token


def decode_options(token: Any) -> dict[str, Any] | None:
    """Decode the options bag. JSON ``null`` is treated as no options."""
    if token is None:
        return None
    if not isinstance(token, Mapping):
        raise DecodeError(f"options must be an object but got {type(token).__name__}")
    return dict(token)
