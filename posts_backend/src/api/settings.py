from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/posts.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - API_TOKENS: comma-separated list of bearer tokens accepted on mutating endpoints
    - LOG_LEVEL: root logging level name. Default 'INFO'
    - SEED_POSTS: number of sample posts to create at startup. Default 0
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    api_tokens: List[str]
    log_level: str
    seed_posts: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int = 0) -> int:
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return default


def _parse_list(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return _parse_list(value)


def load_settings() -> Settings:
    """Read settings from the current environment without caching."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/posts.db").strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=origins,
        api_tokens=_parse_list(_get_env("API_TOKENS", "")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        seed_posts=_parse_int(_get_env("SEED_POSTS", "0")),
    )


# PUBLIC_INTERFACE
@lru_cache
def get_settings() -> Settings:
    """Return application settings loaded once from environment variables."""
    return load_settings()
