"""Configuration helpers: read from environment variables."""

from __future__ import annotations

import os


def get_env(name: str, default: str | None = None) -> str:
    """Get an environment variable, raising if missing and no default."""
    value = os.environ.get(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


# Connection settings for Client.from_env() and the scripts
API_URL = lambda: get_env("CLOUDAPI_URL")
API_USER = lambda: get_env("CLOUDAPI_USER", "")
API_PASSWORD = lambda: get_env("CLOUDAPI_PASSWORD", "")
REQUEST_TIMEOUT = lambda: float(get_env("CLOUDAPI_TIMEOUT", "30"))
LOG_LEVEL = lambda: get_env("CLOUDAPI_LOG_LEVEL", "WARNING")
