# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tasktrack.auth.passwords import hash_password, needs_rehash, verify_password
from tasktrack.errors import Conflict
from tasktrack.infra.models import User
from tasktrack.infra.repository import Repository

DUPLICATE_EMAIL = "User with this email already exists"


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    if email is None:
        return None
    return Repository(db, User).find_one(email=email)


def register_user(db: Session, *, username: str, email: str, password: str) -> User:
    """Create a user with a hashed password.

    Raises Conflict when the email is taken. Any other failure (empty password,
    missing columns, store errors) propagates.
    """
    if get_user_by_email(db, email) is not None:
        raise Conflict(DUPLICATE_EMAIL)
    return Repository(db, User).create(
        {"username": username, "email": email, "password": hash_password(password)}
    )


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when email and password match, else None.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    u = get_user_by_email(db, email)
    if u is None:
        return None
    if not verify_password(u.password, password):
        return None
    if needs_rehash(u.password):
        Repository(db, User).update(u.id, {"password": hash_password(password)})
        db.refresh(u)
    return u
