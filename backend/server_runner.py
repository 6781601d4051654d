"""Uvicorn launcher for the name analysis API, configured from the environment."""

import os
from typing import Any

import uvicorn


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


def build_server_options() -> dict[str, Any]:
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": _env_int("PORT", 8000),
        "workers": _env_int("WEB_CONCURRENCY", 1),
        "timeout_keep_alive": _env_int("UVICORN_TIMEOUT_KEEP_ALIVE", 5),
        "log_level": os.getenv("UVICORN_LOG_LEVEL", "info").strip() or "info",
    }


if __name__ == "__main__":
    uvicorn.run("backend.main:app", **build_server_options())
