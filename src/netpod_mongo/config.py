"""Runtime settings for the pod process."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

MONGODB_URL_ENV = "MONGODB_CONNECTION_URL"
INVOCATION_TIMEOUT_ENV = "NETPOD_MONGO_INVOCATION_TIMEOUT"
LOG_LEVEL_ENV = "NETPOD_MONGO_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PodSettings(BaseModel):
    """Settings read once at startup.

    ``socket_path`` comes from the command line; everything else from the
    environment.
    """

    model_config = ConfigDict(frozen=True)

    socket_path: str = Field(min_length=1)
    mongodb_url: str = "mongodb://localhost:27017"
    server_selection_timeout_ms: int = Field(default=5000, gt=0)
    connect_timeout_ms: int = Field(default=10000, gt=0)
    ping_timeout: float = Field(default=5.0, gt=0)
    invocation_timeout: float | None = Field(default=None, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(
        cls, socket_path: str, environ: Mapping[str, str] | None = None
    ) -> PodSettings:
        env = os.environ if environ is None else environ
        data: dict[str, object] = {"socket_path": socket_path}
        if env.get(MONGODB_URL_ENV):
            data["mongodb_url"] = env[MONGODB_URL_ENV]
        if env.get(INVOCATION_TIMEOUT_ENV):
            data["invocation_timeout"] = env[INVOCATION_TIMEOUT_ENV]
        if env.get(LOG_LEVEL_ENV):
            data["log_level"] = env[LOG_LEVEL_ENV]
        return cls.model_validate(data)
