"""Pod transport: describe/invoke requests as JSON lines over a Unix socket.

Request and response shapes::

    {"op": "describe", "id": "1"}
    {"id": "1", "format": "json", "namespaces": [{"name": ..., "vars": [...]}]}

    {"op": "invoke", "id": "2", "var": "<namespace>/<name>", "args": "[...]"}
    {"id": "2", "status": "done", "value": "<json>"}
    {"id": "2", "status": "error", "ex-message": "...", "ex-data": {"kind": ...}}

``args`` is the JSON text of the positional argument array (a plain array is
accepted too). Invocations on one connection run concurrently; responses are
matched to requests by ``id``.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .correlation import generate_invocation_id, set_invocation_id
from .decoding import decode_args, parse_json
from .exceptions import DecodeError, NetpodMongoError, UnknownOperationError
from .observability import InvocationLogger

logger = logging.getLogger("netpod_mongo.pod")

Handler = Callable[[list[Any]], Awaitable[str]]

DESCRIBE = "describe"
INVOKE = "invoke"


@dataclass(frozen=True)
class Var:
    """A named operation and the handler that serves it."""

    name: str
    handler: Handler


@dataclass(frozen=True)
class Namespace:
    name: str
    vars: tuple[Var, ...] = ()


@dataclass(frozen=True)
class DescribeResponse:
    """Static description of what the pod offers, sent once on request."""

    namespaces: tuple[Namespace, ...] = ()
    format: str = "json"

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "namespaces": [
                {"name": ns.name, "vars": [{"name": v.name} for v in ns.vars]}
                for ns in self.namespaces
            ],
        }

    def lookup(self, qualified_name: str) -> Var:
        """Find ``<namespace>/<name>``; raises UnknownOperationError."""
        ns_name, _, var_name = qualified_name.rpartition("/")
        for ns in self.namespaces:
            if ns.name != ns_name:
                continue
            for var in ns.vars:
                if var.name == var_name:
                    return var
        raise UnknownOperationError(f"unknown var: {qualified_name}")


def error_response(request_id: Any, exc: BaseException) -> dict[str, Any]:
    return {
        "id": request_id,
        "status": "error",
        "ex-message": str(exc),
        "ex-data": {"kind": getattr(exc, "kind", "Error")},
    }


class PodServer:
    """Serve a :class:`DescribeResponse` over a Unix domain socket."""

    def __init__(
        self,
        describe: DescribeResponse,
        *,
        invocation_logger: InvocationLogger | None = None,
        stream_limit: int = 2**24,
    ) -> None:
        self._describe = describe
        self._log_invocation = invocation_logger or InvocationLogger()
        self._stream_limit = stream_limit

    async def handle_request(self, request: Any) -> dict[str, Any]:
        """Answer one decoded request. Pod errors become error responses."""
        if not isinstance(request, Mapping):
            return error_response(None, DecodeError("request must be an object"))
        request_id = request.get("id")
        op = request.get("op")
        try:
            if op == DESCRIBE:
                return {"id": request_id, **self._describe.to_dict()}
            if op == INVOKE:
                return await self._invoke(request_id, request)
            raise UnknownOperationError(f"unknown op: {op!r}")
        except NetpodMongoError as e:
            return error_response(request_id, e)

    async def _invoke(
        self, request_id: Any, request: Mapping[str, Any]
    ) -> dict[str, Any]:
        var_name = request.get("var")
        if not isinstance(var_name, str):
            raise DecodeError("var must be a string")
        var = self._describe.lookup(var_name)
        args = decode_args(request.get("args", []))
        set_invocation_id(
            str(request_id) if request_id is not None else generate_invocation_id()
        )
        value = await self._log_invocation(var_name, lambda: var.handler(args))
        return {"id": request_id, "status": "done", "value": value}

    async def _respond(self, line: bytes) -> dict[str, Any]:
        try:
            request = parse_json(line, "request")
        except DecodeError as e:
            return error_response(None, e)
        try:
            return await self.handle_request(request)
        except Exception as e:  # noqa: BLE001
            logger.exception("Unhandled error while serving request")
            request_id = request.get("id") if isinstance(request, Mapping) else None
            return error_response(request_id, e)

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        write_lock = asyncio.Lock()
        pending: set[asyncio.Task[None]] = set()

        async def respond(line: bytes) -> None:
            response = await self._respond(line)
            async with write_lock:
                writer.write(json.dumps(response).encode() + b"\n")
                await writer.drain()

        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                if not line.strip():
                    continue
                task = asyncio.create_task(respond(line))
                pending.add(task)
                task.add_done_callback(pending.discard)
        except (ConnectionError, ValueError) as e:
            logger.warning("Closing pod connection: %s", e)
        finally:
            # EOF means the client went away: abort in-flight store calls.
            in_flight = list(pending)
            for task in in_flight:
                task.cancel()
            if in_flight:
                logger.info(
                    "Client disconnected; canceled %d invocations", len(in_flight)
                )
                await asyncio.gather(*in_flight, return_exceptions=True)
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    async def start(self, socket_path: str) -> asyncio.AbstractServer:
        return await asyncio.start_unix_server(
            self._handle_connection, path=socket_path, limit=self._stream_limit
        )

    async def serve_forever(self, socket_path: str) -> None:
        server = await self.start(socket_path)
        logger.info("Pod listening on %s", socket_path)
        async with server:
            await server.serve_forever()
