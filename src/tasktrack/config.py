# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

TRUTHY = {"1", "true", "yes", "y"}


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    secret_key: str
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False
    database_url: str = "sqlite:///./tasktrack.db"
    cookie_name: str = "tasktrack_session"
    session_max_age: int = 24 * 60 * 60
    cookie_secure: bool = False
    session_backend: str = "memory"
    log_level: str = "INFO"
    hash_time_cost: int = 3
    hash_memory_cost: int = 64 * 1024


def load_settings() -> Settings:
    """Build Settings from environment variables.

    The secret is not validated here; ``create_app`` refuses to start without it.
    """
    return Settings(
        secret_key=os.getenv("SESSION_SECRET") or os.getenv("TASKTRACK_SECRET_KEY") or "",
        host=os.getenv("TASKTRACK_HOST", "0.0.0.0"),
        port=int(os.getenv("PORT") or os.getenv("TASKTRACK_PORT") or "3000"),
        reload=_flag("TASKTRACK_RELOAD"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./tasktrack.db"),
        cookie_name=os.getenv("TASKTRACK_COOKIE_NAME", "tasktrack_session"),
        session_max_age=int(os.getenv("TASKTRACK_SESSION_MAX_AGE", "86400")),  # 24 hours
        cookie_secure=_flag("TASKTRACK_COOKIE_SECURE"),
        session_backend=os.getenv("TASKTRACK_SESSION_BACKEND", "memory").strip().lower(),
        log_level=os.getenv("TASKTRACK_LOG_LEVEL", "INFO").strip().upper(),
        hash_time_cost=int(os.getenv("TASKTRACK_HASH_TIME_COST", "3")),
        hash_memory_cost=int(os.getenv("TASKTRACK_HASH_MEMORY_COST", "65536")),  # KiB
    )
