# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional


def parse_datetime(value: Any) -> Optional[datetime]:
    """Coerce an ISO-8601 date/datetime string to a datetime.

    None passes through; anything unparseable raises ValueError.
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def pick_fields(payload: Optional[Dict[str, Any]], fields: Dict[str, str]) -> Dict[str, Any]:
    """Map permitted body keys to column names. Missing keys map to None."""
    body = payload or {}
    return {col: body.get(key) for key, col in fields.items()}


def coerce_columns(values: Dict[str, Any], datetime_cols: Iterable[str]) -> Dict[str, Any]:
    out = dict(values)
    for col in datetime_cols:
        if col in out:
            out[col] = parse_datetime(out[col])
    return out
