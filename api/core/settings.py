"""
Runtime settings read from the environment.

Every helper reads `os.environ` on call, so tests can tweak variables with
monkeypatch without re-importing anything.
"""

from __future__ import annotations

import os
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

STORAGE_BACKENDS = {"postgres", "memory"}

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw not in {"0", "false", "False", "no"}


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq's `sslmode` query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def storage_backend() -> str:
    backend = os.environ.get("STORAGE_BACKEND", "postgres").strip().lower() or "postgres"
    if backend not in STORAGE_BACKENDS:
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend!r}.")
    return backend


def db_pool_sizes() -> tuple[int, int]:
    """
    Returns (min_size, max_size) for the asyncpg pool.
    """
    min_size = max(_env_int("DB_POOL_MIN_SIZE", 1), 0)
    max_size = max(_env_int("DB_POOL_MAX_SIZE", 5), 1)
    return min(min_size, max_size), max_size


def db_command_timeout_s() -> float:
    return float(_env_int("DB_COMMAND_TIMEOUT_S", 30))


def create_schema_on_startup() -> bool:
    return _env_flag("DB_CREATE_SCHEMA", True)


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def max_body_bytes() -> int:
    return _env_int("MAX_BODY_BYTES", 1024 * 1024)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
