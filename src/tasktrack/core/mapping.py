# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Mapping between API resources, their models and their JSON fields.

Centralising this keeps the CRUD service resource-agnostic: every resource
route goes through the same list/get/create/update/delete functions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from tasktrack.infra.models import Project, Task

# --- Resource mapping (name -> model + writable fields) ---
# "fields" maps JSON body keys to model attributes. Anything else in a request
# body is ignored.
RESOURCES: Dict[str, Dict[str, Any]] = {
    "project": {
        "model": Project,
        "title": "Project",
        "fields": {
            "name": "name",
            "description": "description",
            "status": "status",
            "dueDate": "due_date",
        },
        "owner_col": "user_id",
    },
    "task": {
        "model": Task,
        "title": "Task",
        "fields": {
            "title": "title",
            "description": "description",
            "completed": "completed",
            "priority": "priority",
            "dueDate": "due_date",
            "projectId": "project_id",
        },
        "owner_col": None,
    },
}

DATETIME_COLUMNS = {"due_date"}


def meta_for(resource: str) -> Optional[Dict[str, Any]]:
    """Return metadata for a resource name (e.g. 'project')."""
    meta = RESOURCES.get(str(resource or "").strip().lower())
    if meta is None:
        return None
    return {"name": resource.strip().lower(), **meta}
