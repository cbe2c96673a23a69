"""MongoConnectionManager: the pod's one Motor client and its startup ping."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pymongo.errors import PyMongoError

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

    from .config import PodSettings

logger = logging.getLogger("netpod_mongo.connection")


class MongoConnectionManager:
    """Own the Motor client that every invocation borrows.

    Operations never close or reconfigure the client; only the process
    entry point does, on shutdown.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
    ) -> None:
        self._url = url
        self._client_options = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
        }
        self._client: AsyncIOMotorClient[Any] | None = None

    @classmethod
    def from_settings(cls, settings: PodSettings) -> MongoConnectionManager:
        return cls(
            settings.mongodb_url,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
            connect_timeout_ms=settings.connect_timeout_ms,
        )

    async def connect(self) -> AsyncIOMotorClient[Any]:
        """Build the client on first call and reuse it afterwards."""
        if self._client is None:
            from motor.motor_asyncio import AsyncIOMotorClient

            try:
                self._client = AsyncIOMotorClient(self._url, **self._client_options)
            except (PyMongoError, TypeError, ValueError) as e:
                raise MongoConnectionError(f"cannot create client: {e}") from e
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return self._client

    def close(self) -> None:
        """Release the client. Safe to call when never connected."""
        client, self._client = self._client, None
        if client is not None:
            client.close()

    async def health_check(self, timeout: float = 5.0) -> bool:
        """Ping the server within ``timeout`` seconds; return True if reachable."""
        if self._client is None:
            return False
        try:
            await asyncio.wait_for(self._client.admin.command("ping"), timeout)
        except (PyMongoError, asyncio.TimeoutError) as e:
            logger.error("MongoDB ping failed: %s", e)
            return False
        return True
