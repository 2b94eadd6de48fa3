# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session stores and the signed cookie that carries their tokens.

A store maps an opaque token to a :class:`SessionData`. The token never reaches
the client as-is: :class:`CookieSigner` signs it with the application secret
so tampered or stale cookies resolve to no session at all.
"""

from __future__ import annotations

import secrets
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

DEFAULT_MAX_AGE_SECONDS = 24 * 60 * 60


class SessionStoreError(RuntimeError):
    """Raised when a store cannot complete an operation."""


@dataclass(frozen=True)
class SessionData:
    user_id: int
    username: str
    email: str


class SessionStore(ABC):
    max_age: int = DEFAULT_MAX_AGE_SECONDS

    @abstractmethod
    def create(self, data: SessionData) -> str:
        """Register a session and return its token."""

    @abstractmethod
    def resolve(self, token: str) -> Optional[SessionData]:
        """Return the live session for token, or None."""

    @abstractmethod
    def destroy(self, token: str) -> None:
        """End the session. Unknown tokens are ignored.

        Backends raise SessionStoreError when the session cannot be removed.
        """


class MemorySessionStore(SessionStore):
    """Process-local store. Sessions vanish on restart."""

    def __init__(self, max_age: int = DEFAULT_MAX_AGE_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.max_age = max_age
        self._clock = clock
        self._lock = threading.Lock()
        self._records: Dict[str, Tuple[SessionData, float]] = {}

    def create(self, data: SessionData) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._purge()
            self._records[token] = (data, self._clock() + self.max_age)
        return token

    def resolve(self, token: str) -> Optional[SessionData]:
        if not token:
            return None
        with self._lock:
            rec = self._records.get(token)
            if rec is None:
                return None
            data, expires_at = rec
            if self._clock() >= expires_at:
                del self._records[token]
                return None
            return data

    def destroy(self, token: str) -> None:
        if not token:
            return
        with self._lock:
            self._records.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _purge(self) -> None:
        now = self._clock()
        expired = [t for t, (_, exp) in self._records.items() if now >= exp]
        for t in expired:
            del self._records[t]


class SignedSessionStore(SessionStore):
    """Stateless store: the identity travels inside the signed token.

    Destroyed tokens are remembered until they would have expired anyway.
    """

    def __init__(
        self,
        secret: str,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        *,
        salt: str = "tasktrack.session.v1",
        clock: Callable[[], float] = time.monotonic,
    ):
        if not secret:
            raise RuntimeError("Missing session secret")
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)
        self._clock = clock
        self._lock = threading.Lock()
        self._revoked: Dict[str, float] = {}

    def create(self, data: SessionData) -> str:
        return self._serializer.dumps(
            {"i": data.user_id, "u": data.username, "e": data.email, "n": secrets.token_hex(8)}
        )

    def resolve(self, token: str) -> Optional[SessionData]:
        if not token:
            return None
        with self._lock:
            if token in self._revoked:
                return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        if not isinstance(data, dict) or data.get("i") is None:
            return None
        return SessionData(
            user_id=int(data["i"]),
            username=str(data.get("u") or ""),
            email=str(data.get("e") or ""),
        )

    def destroy(self, token: str) -> None:
        if not token:
            return
        with self._lock:
            now = self._clock()
            for t in [t for t, exp in self._revoked.items() if now >= exp]:
                del self._revoked[t]
            self._revoked[token] = now + self.max_age


class CookieSigner:
    """Signs store tokens for use as cookie values."""

    def __init__(self, secret: str, *, salt: str = "tasktrack.cookie.v1"):
        if not secret:
            raise RuntimeError("Missing session secret")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)

    def dumps(self, token: str) -> str:
        return self._serializer.dumps(token)

    def loads(self, value: str, *, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> str:
        """Return the token inside a cookie value, or '' when invalid."""
        if not value:
            return ""
        try:
            token = self._serializer.loads(value, max_age=max_age)
        except (BadSignature, BadTimeSignature):
            return ""
        return token if isinstance(token, str) else ""


def build_session_store(*, backend: str, secret: str, max_age: int) -> SessionStore:
    b = (backend or "memory").strip().lower()
    if b == "memory":
        return MemorySessionStore(max_age=max_age)
    if b == "signed":
        return SignedSessionStore(secret, max_age=max_age)
    raise ValueError(f"Unknown session backend '{backend}'")
