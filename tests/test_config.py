"""Unit tests for PodSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from netpod_mongo.config import PodSettings


def test_defaults() -> None:
    settings = PodSettings.from_env("/tmp/pod.sock", environ={})
    assert settings.socket_path == "/tmp/pod.sock"
    assert settings.mongodb_url == "mongodb://localhost:27017"
    assert settings.invocation_timeout is None
    assert settings.ping_timeout == 5.0
    assert settings.log_level == "INFO"


def test_reads_environment() -> None:
    settings = PodSettings.from_env(
        "/tmp/pod.sock",
        environ={
            "MONGODB_CONNECTION_URL": "mongodb://db:27017/?replicaSet=rs0",
            "NETPOD_MONGO_INVOCATION_TIMEOUT": "2.5",
            "NETPOD_MONGO_LOG_LEVEL": "debug",
        },
    )
    assert settings.mongodb_url == "mongodb://db:27017/?replicaSet=rs0"
    assert settings.invocation_timeout == 2.5
    assert settings.log_level == "DEBUG"


def test_empty_values_use_defaults() -> None:
    settings = PodSettings.from_env(
        "/tmp/pod.sock", environ={"MONGODB_CONNECTION_URL": ""}
    )
    assert settings.mongodb_url == "mongodb://localhost:27017"


@pytest.mark.parametrize(
    "environ",
    [
        {"NETPOD_MONGO_INVOCATION_TIMEOUT": "-1"},
        {"NETPOD_MONGO_INVOCATION_TIMEOUT": "soon"},
        {"NETPOD_MONGO_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_rejected(environ) -> None:
    with pytest.raises(ValidationError):
        PodSettings.from_env("/tmp/pod.sock", environ=environ)


def test_socket_path_required() -> None:
    with pytest.raises(ValidationError):
        PodSettings.from_env("", environ={})


def test_frozen() -> None:
    settings = PodSettings.from_env("/tmp/pod.sock", environ={})
    with pytest.raises(ValidationError):
        settings.mongodb_url = "mongodb://elsewhere"
