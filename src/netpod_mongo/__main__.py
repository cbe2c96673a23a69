"""Entry point: ``netpod-mongo <socket-path>``.

Connects to ``$MONGODB_CONNECTION_URL``, pings the server and serves the pod
on the given Unix socket until interrupted.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from .config import PodSettings
from .connection import MongoConnectionManager
from .exceptions import MongoConnectionError
from .handlers import build_describe
from .pod import PodServer

logger = logging.getLogger("netpod_mongo")


async def run(settings: PodSettings) -> int:
    """Connect, check the server is reachable, then serve. Returns exit code."""
    connection = MongoConnectionManager.from_settings(settings)
    try:
        client = await connection.connect()
    except MongoConnectionError as e:
        logger.error("Cannot create MongoDB client: %s", e)
        return 1
    try:
        if not await connection.health_check(settings.ping_timeout):
            return 1
        logger.info("Connected to MongoDB!")

        with contextlib.suppress(FileNotFoundError):
            os.remove(settings.socket_path)

        describe = build_describe(client, timeout=settings.invocation_timeout)
        await PodServer(describe).serve_forever(settings.socket_path)
    finally:
        connection.close()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("Missing a filepath argument for socket to listen on\n")
        return 1
    try:
        settings = PodSettings.from_env(args[0])
    except ValidationError as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 1
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(run(settings))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
