"""Pod handlers: positional JSON arguments in, JSON text out.

The caller signals "options present" by passing a fourth argument; these
adapters turn that arity convention into the optional ``options`` parameter
of the operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import operations
from .decoding import check_arity, decode_filters, decode_options, decode_string
from .pod import DescribeResponse, Handler, Namespace, Var
from .serialization import dumps

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

    from .decoding import FilterSet

NAMESPACE = "netpod.jlabath.mongo"

LIST_COLLECTIONS = "list-collections"
FIND_ONE = "find-one"
FIND_MANY = "find-many"


def _find_args(
    var: str, args: list[Any]
) -> tuple[str, str, FilterSet, dict[str, Any] | None]:
    check_arity(var, args, 3, 4)
    database = decode_string(args[0], "database name")
    collection = decode_string(args[1], "collection name")
    filters = decode_filters(args[2])
    options = decode_options(args[3]) if len(args) == 4 else None
    return database, collection, filters, options


def list_collections_handler(
    client: AsyncIOMotorClient[Any], *, timeout: float | None = None
) -> Handler:
    async def handler(args: list[Any]) -> str:
        check_arity(LIST_COLLECTIONS, args, 1)
        database = decode_string(args[0], "database name")
        names = await operations.list_collections(client, database, timeout=timeout)
        return dumps(names)

    return handler


def find_one_handler(
    client: AsyncIOMotorClient[Any], *, timeout: float | None = None
) -> Handler:
    async def handler(args: list[Any]) -> str:
        database, collection, filters, options = _find_args(FIND_ONE, args)
        doc = await operations.find_one(
            client, database, collection, filters, options, timeout=timeout
        )
        return dumps(doc)

    return handler


def find_many_handler(
    client: AsyncIOMotorClient[Any], *, timeout: float | None = None
) -> Handler:
    async def handler(args: list[Any]) -> str:
        database, collection, filters, options = _find_args(FIND_MANY, args)
        docs = await operations.find_many(
            client, database, collection, filters, options, timeout=timeout
        )
        return dumps(docs)

    return handler


def build_describe(
    client: AsyncIOMotorClient[Any], *, timeout: float | None = None
) -> DescribeResponse:
    """Describe the Mongo namespace with handlers bound to ``client``."""
    pod_vars = (
        Var(LIST_COLLECTIONS, list_collections_handler(client, timeout=timeout)),
        Var(FIND_ONE, find_one_handler(client, timeout=timeout)),
        Var(FIND_MANY, find_many_handler(client, timeout=timeout)),
    )
    return DescribeResponse(namespaces=(Namespace(NAMESPACE, pod_vars),))
