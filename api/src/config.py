"""API configuration loaded from the YAML ``api`` section."""

import os
from dataclasses import dataclass

from shared.errors import ConfigError


@dataclass(frozen=True)
class ApiConfig:
    database_url: str = "sqlite:///pixan-logs.sqlite"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_dict(cls, d: dict, environ=None) -> "ApiConfig":
        if environ is None:
            environ = os.environ
        try:
            port = int(d.get("port", cls.port))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"port must be an integer, got {d.get('port')!r}") from exc
        return cls(
            database_url=environ.get("DATABASE_URL") or d.get("database_url", cls.database_url),
            host=d.get("host", cls.host),
            port=port,
        )
