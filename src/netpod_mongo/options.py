"""Resolve a caller-supplied options bag into driver query modifiers.

Each recognised key is checked on its own. A value with the wrong shape is
logged and skipped so one bad modifier never fails the whole call. Unknown
keys are ignored.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("netpod_mongo.options")

PROJECTION = "projection"
SORT = "sort"
ALLOW_DISK_USE = "allow-disk-use"
LIMIT = "limit"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_UNSET = object()


def _warn(key: str, value: Any) -> None:
    logger.warning("unexpected value for %s: %r", key, value)


def _projection(value: Any) -> Any:
    # Document-shaped: a field map, or a list of field names.
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return _UNSET


def _sort(value: Any) -> Any:
    """Normalise ``{"a": 1}`` or ``[["a", 1]]`` to ``[("a", 1)]``."""
    if isinstance(value, Mapping):
        return list(value.items())
    if not isinstance(value, list):
        return _UNSET
    result: list[tuple[str, Any]] = []
    for item in value:
        if (
            not isinstance(item, (list, tuple))
            or len(item) != 2
            or not isinstance(item[0], str)
        ):
            return _UNSET
        result.append((item[0], item[1]))
    return result


def _allow_disk_use(value: Any) -> Any:
    return value if isinstance(value, bool) else _UNSET


def _limit(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _UNSET
    if isinstance(value, float) and not math.isfinite(value):
        return _UNSET
    limit = int(value)
    if not _INT64_MIN <= limit <= _INT64_MAX:
        return _UNSET
    return limit


def _resolve(
    bag: Mapping[str, Any] | None, key: str, check: Callable[[Any], Any]
) -> Any:
    """Return the checked value for ``key`` or None when absent or invalid."""
    if not bag or key not in bag:
        return None
    raw = bag[key]
    value = check(raw)
    if value is _UNSET:
        _warn(key, raw)
        return None
    return value


@dataclass(frozen=True)
class FindOneOptions:
    """Modifiers honoured by find-one."""

    projection: Any = None

    def to_kwargs(self) -> dict[str, Any]:
        if self.projection is None:
            return {}
        return {"projection": self.projection}


@dataclass(frozen=True)
class FindOptions:
    """Modifiers honoured by find-many."""

    projection: Any = None
    sort: list[tuple[str, Any]] | None = None
    allow_disk_use: bool | None = None
    limit: int | None = None

    def to_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.projection is not None:
            kwargs["projection"] = self.projection
        if self.sort:
            kwargs["sort"] = self.sort
        if self.allow_disk_use is not None:
            kwargs["allow_disk_use"] = self.allow_disk_use
        if self.limit is not None:
            kwargs["limit"] = self.limit
        return kwargs


def resolve_find_one_options(bag: Mapping[str, Any] | None) -> FindOneOptions:
    return FindOneOptions(projection=_resolve(bag, PROJECTION, _projection))


def resolve_find_options(bag: Mapping[str, Any] | None) -> FindOptions:
    return FindOptions(
        projection=_resolve(bag, PROJECTION, _projection),
        sort=_resolve(bag, SORT, _sort),
        allow_disk_use=_resolve(bag, ALLOW_DISK_USE, _allow_disk_use),
        limit=_resolve(bag, LIMIT, _limit),
    )
