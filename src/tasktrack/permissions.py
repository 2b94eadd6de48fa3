# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from tasktrack.auth.session import SessionStore
from tasktrack.config import Settings
from tasktrack.errors import AuthRequired

AUTH_REQUIRED = "Authentication required. Please log in."


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str
    email: str


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def session_token(request: Request) -> str:
    """Return the store token carried by the request cookie, or ''."""
    settings: Settings = request.app.state.settings
    raw = request.cookies.get(settings.cookie_name, "")
    return request.app.state.cookie_signer.loads(raw, max_age=settings.session_max_age)


def load_user_from_request(request: Request) -> Optional[CurrentUser]:
    token = session_token(request)
    sess = get_session_store(request).resolve(token)
    if not sess:
        return None
    return CurrentUser(id=sess.user_id, username=sess.username, email=sess.email)


def current_user_optional(request: Request) -> Optional[CurrentUser]:
    u = getattr(request.state, "user", None)
    if u is not None:
        return u
    return load_user_from_request(request)


def require_user(request: Request) -> CurrentUser:
    u = current_user_optional(request)
    if u is None:
        raise AuthRequired(AUTH_REQUIRED)
    request.state.user = u
    return u


def cookie_settings(settings: Settings) -> dict:
    return {
        "max_age": settings.session_max_age,
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
    }
