"""
Environment-backed settings helpers.

Every tunable is a plain environment variable. Helpers never raise on bad
input; they fall back to the provided default.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5175",
    "http://localhost:5176",
    "http://localhost:3000",
]


def cors_allowed_origins() -> list[str]:
    return env_list("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def auto_migrate() -> bool:
    return env_bool("DB_AUTO_MIGRATE", True)


def dev_proxy_enabled() -> bool:
    return env_bool("DEV_PROXY_ENABLED", False)
