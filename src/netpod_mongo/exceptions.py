"""Error taxonomy for the Mongo pod.

Every error carries a ``kind`` that is relayed to the caller in ``ex-data``
so the caller can branch on it (e.g. "absent" vs "broken").
"""

from __future__ import annotations


class NetpodMongoError(Exception):
    """Root exception for the Mongo pod."""

    kind = "Error"


class DecodeError(NetpodMongoError):
    """Raised when an argument is malformed JSON or has the wrong shape."""

    kind = "DecodeError"


class ArgumentError(NetpodMongoError):
    """Raised when an operation receives the wrong number of arguments."""

    kind = "ArgumentError"

    def __init__(self, var: str, expected: tuple[int, ...], got: int) -> None:
        self.var = var
        self.expected = expected
        self.got = got
        wanted = " or ".join(str(n) for n in expected)
        super().__init__(f"{var} expects {wanted} arguments but got {got}")


class NotFoundError(NetpodMongoError):
    """Raised when find-one matches no document."""

    kind = "NotFound"

    def __init__(self, database: str, collection: str) -> None:
        self.database = database
        self.collection = collection
        super().__init__(f"no documents in result ({database}.{collection})")


class StoreError(NetpodMongoError):
    """Raised when the driver fails for any reason other than "no match"."""

    kind = "StoreError"


class CanceledError(NetpodMongoError):
    """Raised when a store call is aborted by a timeout or cancellation."""

    kind = "Canceled"


class UnknownOperationError(NetpodMongoError):
    """Raised when the transport is asked for an op or var it does not know."""

    kind = "UnknownOperation"


class MongoConnectionError(NetpodMongoError):
    """Raised when connection to MongoDB fails."""

    kind = "ConnectionError"
