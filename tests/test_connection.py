"""Unit tests for MongoConnectionManager (without real MongoDB)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from netpod_mongo.config import PodSettings
from netpod_mongo.connection import MongoConnectionManager
from netpod_mongo.exceptions import MongoConnectionError


def _connected(client: MagicMock) -> MongoConnectionManager:
    mgr = MongoConnectionManager(url="mongodb://localhost:27017")
    mgr._client = client
    return mgr


def test_client_raises_before_connect() -> None:
    mgr = MongoConnectionManager(url="mongodb://localhost:27017")
    with pytest.raises(MongoConnectionError, match="Not connected"):
        _ = mgr.client


def test_close_idempotent() -> None:
    mgr = MongoConnectionManager()
    mgr.close()  # sync; idempotent when not connected
    mgr.close()


def test_close_releases_client() -> None:
    client = MagicMock()
    mgr = _connected(client)
    mgr.close()
    client.close.assert_called_once_with()
    with pytest.raises(MongoConnectionError):
        _ = mgr.client


@pytest.mark.asyncio
async def test_connect_is_idempotent(monkeypatch) -> None:
    import motor.motor_asyncio

    created = []

    def fake_client(*args, **kwargs):
        created.append((args, kwargs))
        return MagicMock()

    monkeypatch.setattr(motor.motor_asyncio, "AsyncIOMotorClient", fake_client)
    mgr = MongoConnectionManager(
        url="mongodb://db:27017", server_selection_timeout_ms=1500
    )
    first = await mgr.connect()
    second = await mgr.connect()

    assert first is second
    assert len(created) == 1
    args, kwargs = created[0]
    assert args == ("mongodb://db:27017",)
    assert kwargs["serverSelectionTimeoutMS"] == 1500
    assert kwargs["connectTimeoutMS"] == 10000


@pytest.mark.asyncio
async def test_connect_wraps_bad_url(monkeypatch) -> None:
    import motor.motor_asyncio

    def fake_client(*args, **kwargs):
        raise ValueError("bad uri")

    monkeypatch.setattr(motor.motor_asyncio, "AsyncIOMotorClient", fake_client)
    with pytest.raises(MongoConnectionError, match="bad uri"):
        await MongoConnectionManager(url="nonsense").connect()


@pytest.mark.asyncio
async def test_health_check_not_connected() -> None:
    assert await MongoConnectionManager().health_check() is False


@pytest.mark.asyncio
async def test_health_check_ok() -> None:
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    assert await _connected(client).health_check() is True
    client.admin.command.assert_awaited_once_with("ping")


@pytest.mark.asyncio
async def test_health_check_unreachable() -> None:
    client = MagicMock()
    client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
    assert await _connected(client).health_check() is False


@pytest.mark.asyncio
async def test_health_check_times_out() -> None:
    async def _hang(*args, **kwargs):
        await asyncio.sleep(3600)

    client = MagicMock()
    client.admin.command = _hang
    assert await _connected(client).health_check(timeout=0.01) is False


def test_from_settings_carries_timeouts() -> None:
    settings = PodSettings(
        socket_path="/tmp/pod.sock",
        mongodb_url="mongodb://db:27017",
        server_selection_timeout_ms=1500,
        connect_timeout_ms=2500,
    )
    mgr = MongoConnectionManager.from_settings(settings)
    assert mgr._url == "mongodb://db:27017"
    assert mgr._client_options == {
        "serverSelectionTimeoutMS": 1500,
        "connectTimeoutMS": 2500,
    }
