"""Read operations exposed by the pod: list-collections, find-one, find-many.

Each operation borrows the shared Motor client for the duration of the call
and never closes or reconfigures it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from pymongo.errors import PyMongoError

from .exceptions import CanceledError, NotFoundError, StoreError
from .options import resolve_find_one_options, resolve_find_options

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

    from .decoding import FilterSet

logger = logging.getLogger("netpod_mongo.operations")

R = TypeVar("R")


async def _store_call(
    awaitable: Awaitable[R], action: str, timeout: float | None
) -> R:
    """Await a driver call, mapping timeouts and driver failures."""
    try:
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise CanceledError(f"{action} canceled after {timeout}s") from e
    except (PyMongoError, TypeError, ValueError) as e:
        raise StoreError(f"{action} failed with: {e}") from e


def _database(client: AsyncIOMotorClient[Any], database: str, action: str) -> Any:
    # The driver rejects empty names, and "." or " " in a database name, here.
    try:
        return client[database]
    except PyMongoError as e:
        raise StoreError(f"{action} failed with: {e}") from e


def _collection(
    client: AsyncIOMotorClient[Any], database: str, collection: str, action: str
) -> Any:
    try:
        return _database(client, database, action)[collection]
    except PyMongoError as e:
        raise StoreError(f"{action} failed with: {e}") from e


async def list_collections(
    client: AsyncIOMotorClient[Any],
    database: str,
    *,
    timeout: float | None = None,
) -> list[str]:
    """Return the collection names of ``database``."""
    db = _database(client, database, "list_collection_names")
    names = await _store_call(
        db.list_collection_names(), "list_collection_names", timeout
    )
    logger.debug("Listed %d collections in %s", len(names), database)
    return list(names)


async def find_one(
    client: AsyncIOMotorClient[Any],
    database: str,
    collection: str,
    filters: FilterSet,
    options: Mapping[str, Any] | None = None,
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Return the first document matching ``filters``.

    Only the ``projection`` option applies. Raises :class:`NotFoundError`
    when nothing matches.
    """
    opts = resolve_find_one_options(options)
    coll = _collection(client, database, collection, "findOne")
    doc = await _store_call(
        coll.find_one(filters.to_filter(), **opts.to_kwargs()),
        "findOne",
        timeout,
    )
    if doc is None:
        raise NotFoundError(database, collection)
    return dict(doc)


async def find_many(
    client: AsyncIOMotorClient[Any],
    database: str,
    collection: str,
    filters: FilterSet,
    options: Mapping[str, Any] | None = None,
    *,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """Return every document matching ``filters`` in cursor order.

    Honours ``projection``, ``sort``, ``allow-disk-use`` and ``limit``. No
    match is an empty list, not an error.
    """
    opts = resolve_find_options(options)
    coll = _collection(client, database, collection, "findMany")
    try:
        cursor = coll.find(filters.to_filter(), **opts.to_kwargs())
    except (PyMongoError, TypeError, ValueError) as e:
        raise StoreError(f"findMany failed with: {e}") from e
    docs = await _store_call(cursor.to_list(length=None), "findMany cursor", timeout)
    logger.debug(
        "findMany %s.%s returned %d documents", database, collection, len(docs)
    )
    return [dict(doc) for doc in docs]
