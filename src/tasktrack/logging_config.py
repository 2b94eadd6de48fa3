# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""dictConfig shared by the app loggers and uvicorn (passed as ``log_config``)."""

from __future__ import annotations

from typing import Any, Dict

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    level = (level or "INFO").upper()
    stdout = {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stdout"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": FORMAT}},
        "handlers": {"default": stdout},
        "loggers": {
            name: {"handlers": ["default"], "level": lvl, "propagate": False}
            for name, lvl in (("uvicorn", "INFO"), ("uvicorn.access", "INFO"), ("tasktrack", level))
        },
        "root": {"level": level, "handlers": ["default"]},
    }
