# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential hashing (argon2id).

The cost parameters are process-wide and set once by ``create_app``. Hashes
made under older parameters still verify; ``needs_rehash`` tells the login
flow when to upgrade them.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 64 * 1024  # KiB

_PH = PasswordHasher(time_cost=DEFAULT_TIME_COST, memory_cost=DEFAULT_MEMORY_COST)


def configure(*, time_cost: int = DEFAULT_TIME_COST, memory_cost: int = DEFAULT_MEMORY_COST) -> None:
    global _PH
    _PH = PasswordHasher(time_cost=time_cost, memory_cost=memory_cost)


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    """Check plain against a stored hash. Never raises for bad credentials."""
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hash_value: str) -> bool:
    try:
        return _PH.check_needs_rehash(hash_value)
    except InvalidHashError:
        return True
