# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

M = TypeVar("M")


class Repository(Generic[M]):
    """Keyed CRUD over one mapped model.

    Writes commit immediately and roll back on failure; errors propagate to the
    caller unchanged.
    """

    def __init__(self, db: Session, model: Type[M]):
        self.db = db
        self.model = model

    def find_all(self) -> List[M]:
        return list(self.db.scalars(select(self.model).order_by(self.model.id)))

    def find_by_pk(self, pk: int) -> Optional[M]:
        return self.db.get(self.model, pk)

    def find_one(self, **criteria: Any) -> Optional[M]:
        return self.db.scalars(select(self.model).filter_by(**criteria).limit(1)).first()

    def create(self, values: Dict[str, Any]) -> M:
        obj = self.model(**values)
        try:
            self.db.add(obj)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(obj)
        return obj

    def update(self, pk: int, values: Dict[str, Any]) -> int:
        """Overwrite the given columns of row pk. Returns affected row count."""
        stmt = update(self.model).where(self.model.id == pk).values(**values)
        return self._execute(stmt)

    def destroy(self, pk: int) -> int:
        """Delete row pk. Returns affected row count."""
        return self._execute(delete(self.model).where(self.model.id == pk))

    def _execute(self, stmt) -> int:
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return int(result.rowcount or 0)
