from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'file' (default) or 'memory'
    - DATA_FILE: path to the JSON snapshot file. Default './data/data.json'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - HOST: interface to bind when run as a server (default: 0.0.0.0)
    - PORT: port to bind when run as a server (default: 3000)
    - LOG_LEVEL: root logging level name (default: INFO)
    """

    persistence_backend: str
    data_file: str
    cors_allow_origins: List[str]
    host: str
    port: int
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "file").strip().lower()
    if backend not in {"file", "memory"}:
        backend = "file"

    return Settings(
        persistence_backend=backend,
        data_file=_get_env("DATA_FILE", "./data/data.json").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
