"""Syncer configuration loaded from the YAML ``syncer`` section and env vars."""

import os
from dataclasses import dataclass

from shared.errors import ConfigError

DEFAULTS = {
    "sink_endpoint": "https://pixan-logs.vercel.app/api/logs",
    "log_directory": "/tmp/openclaw",
    "checkpoint_path": "/tmp/pixan-log-sync-state.json",
    "request_timeout": 10.0,
}

ENDPOINT_ENV_VAR = "PIXAN_LOGS_API"


@dataclass(frozen=True)
class SyncConfig:
    sink_endpoint: str
    log_directory: str
    checkpoint_path: str
    request_timeout: float

    @classmethod
    def from_dict(cls, d: dict) -> "SyncConfig":
        merged = {**DEFAULTS, **{k: v for k, v in d.items() if v is not None}}
        try:
            timeout = float(merged["request_timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"request_timeout must be a number, got {merged['request_timeout']!r}"
            ) from exc
        if timeout <= 0:
            raise ConfigError("request_timeout must be positive")

        for key in ("sink_endpoint", "log_directory", "checkpoint_path"):
            if not isinstance(merged[key], str) or not merged[key]:
                raise ConfigError(f"{key} must be a non-empty string")

        return cls(
            sink_endpoint=merged["sink_endpoint"],
            log_directory=merged["log_directory"],
            checkpoint_path=merged["checkpoint_path"],
            request_timeout=timeout,
        )


def load_sync_config(section: dict, overrides: dict | None = None,
                     environ=None) -> SyncConfig:
    """Build SyncConfig from defaults <- YAML section <- env <- CLI overrides."""
    if environ is None:
        environ = os.environ

    values = dict(section)
    if environ.get(ENDPOINT_ENV_VAR):
        values["sink_endpoint"] = environ[ENDPOINT_ENV_VAR]
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    return SyncConfig.from_dict(values)
