# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Resource-agnostic CRUD used by the project and task routes.

Every function maps persistence outcomes to API errors:
- missing row / zero affected rows -> NotFound ("<Resource> not found")
- any other failure -> logged with traceback, then Internal with a generic
  per-resource message (no internal detail reaches the client)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from tasktrack.core.mapping import DATETIME_COLUMNS, meta_for
from tasktrack.core.utils import coerce_columns, pick_fields
from tasktrack.errors import Internal, NotFound
from tasktrack.infra.repository import Repository

logger = logging.getLogger(__name__)


def _meta(resource: str) -> Dict[str, Any]:
    meta = meta_for(resource)
    if not meta:
        raise ValueError(f"Unknown resource '{resource}'")
    return meta


def _repo(db: Session, meta: Dict[str, Any]) -> Repository:
    return Repository(db, meta["model"])


def _internal(meta: Dict[str, Any], action: str, *, plural: bool = False) -> Internal:
    noun = meta["name"] + ("s" if plural else "")
    logger.exception("Error %s %s", action, noun)
    verb = {"fetching": "fetch", "creating": "create", "updating": "update", "deleting": "delete"}[action]
    return Internal(f"Failed to {verb} {noun}")


def list_records(db: Session, resource: str) -> List[Dict[str, Any]]:
    meta = _meta(resource)
    try:
        return [r.to_dict() for r in _repo(db, meta).find_all()]
    except Exception:
        raise _internal(meta, "fetching", plural=True)


def get_record(db: Session, resource: str, pk: int) -> Dict[str, Any]:
    meta = _meta(resource)
    try:
        row = _repo(db, meta).find_by_pk(pk)
    except Exception:
        raise _internal(meta, "fetching")
    if row is None:
        raise NotFound(f"{meta['title']} not found")
    return row.to_dict()


def create_record(
    db: Session,
    resource: str,
    payload: Optional[Dict[str, Any]],
    *,
    owner_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Insert a row from the permitted body fields.

    Absent fields are left out so column defaults apply; the store rejects
    missing required columns. For owned resources the owner always comes from
    ``owner_id``, never from the body.
    """
    meta = _meta(resource)
    try:
        values = coerce_columns(pick_fields(payload, meta["fields"]), DATETIME_COLUMNS)
        values = {k: v for k, v in values.items() if v is not None}
        if meta.get("owner_col"):
            values[meta["owner_col"]] = owner_id
        return _repo(db, meta).create(values).to_dict()
    except Exception:
        raise _internal(meta, "creating")


def update_record(db: Session, resource: str, pk: int, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Full replace: every permitted field is written, omitted ones as NULL."""
    meta = _meta(resource)
    repo = _repo(db, meta)
    try:
        values = coerce_columns(pick_fields(payload, meta["fields"]), DATETIME_COLUMNS)
        affected = repo.update(pk, values)
        row = repo.find_by_pk(pk) if affected else None
    except Exception:
        raise _internal(meta, "updating")
    if not affected or row is None:
        raise NotFound(f"{meta['title']} not found")
    return row.to_dict()


def delete_record(db: Session, resource: str, pk: int) -> Dict[str, str]:
    meta = _meta(resource)
    try:
        affected = _repo(db, meta).destroy(pk)
    except Exception:
        raise _internal(meta, "deleting")
    if not affected:
        raise NotFound(f"{meta['title']} not found")
    return {"message": f"{meta['title']} deleted successfully"}
