"""MongoDB read operations served as a netpod.

Translates untyped JSON filter tuples and option bags into Motor queries and
re-encodes the results as JSON.
"""

from __future__ import annotations

import logging

from .config import PodSettings
from .connection import MongoConnectionManager
from .decoding import (
    DecodedValue,
    FilterSet,
    FilterTuple,
    Reference,
    Value,
    decode_filters,
    decode_value,
)
from .exceptions import (
    ArgumentError,
    CanceledError,
    DecodeError,
    MongoConnectionError,
    NetpodMongoError,
    NotFoundError,
    StoreError,
    UnknownOperationError,
)
from .handlers import NAMESPACE, build_describe
from .operations import find_many, find_one, list_collections
from .options import (
    FindOneOptions,
    FindOptions,
    resolve_find_one_options,
    resolve_find_options,
)
from .pod import DescribeResponse, Namespace, PodServer, Var
from .serialization import dumps, to_wire

# Library logs are discarded unless the application configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Decoding
    "DecodedValue",
    "FilterSet",
    "FilterTuple",
    "Reference",
    "Value",
    "decode_filters",
    "decode_value",
    # Options
    "FindOneOptions",
    "FindOptions",
    "resolve_find_one_options",
    "resolve_find_options",
    # Operations
    "list_collections",
    "find_one",
    "find_many",
    # Serialization
    "dumps",
    "to_wire",
    # Transport
    "NAMESPACE",
    "DescribeResponse",
    "Namespace",
    "PodServer",
    "Var",
    "build_describe",
    # Runtime
    "MongoConnectionManager",
    "PodSettings",
    # Exceptions
    "NetpodMongoError",
    "DecodeError",
    "ArgumentError",
    "NotFoundError",
    "StoreError",
    "CanceledError",
    "UnknownOperationError",
    "MongoConnectionError",
]
