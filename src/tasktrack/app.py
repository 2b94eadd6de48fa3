# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request, Response
from sqlalchemy.orm import Session

from tasktrack.auth import passwords
from tasktrack.auth.session import CookieSigner, SessionData, SessionStore, build_session_store
from tasktrack.auth.users import authenticate, register_user
from tasktrack.config import Settings, load_settings
from tasktrack.errors import ApiError, Conflict, CredentialInvalid, Internal, api_error_handler
from tasktrack.infra.db import check_connection, get_db, init_db, make_engine, make_session_factory
from tasktrack.permissions import (
    CurrentUser,
    cookie_settings,
    current_user_optional,
    get_session_store,
    require_user,
    session_token,
)
from tasktrack.services.crud_service import (
    create_record,
    delete_record,
    get_record,
    list_records,
    update_record,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

Payload = Optional[Dict[str, Any]]


def create_app(settings: Optional[Settings] = None, *, session_store: Optional[SessionStore] = None) -> FastAPI:
    """Build the application.

    ``session_store`` overrides the backend chosen by settings (tests inject
    their own).
    """
    settings = settings or load_settings()
    if not settings.secret_key:
        raise RuntimeError("Missing SESSION_SECRET (or TASKTRACK_SECRET_KEY) in environment")

    passwords.configure(time_cost=settings.hash_time_cost, memory_cost=settings.hash_memory_cost)
    engine = make_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A failed check is logged only; requests will report their own errors.
        check_connection(engine)
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(title="tasktrack", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    if session_store is None:
        session_store = build_session_store(
            backend=settings.session_backend,
            secret=settings.secret_key,
            max_age=settings.session_max_age,
        )
    app.state.sessions = session_store
    app.state.cookie_signer = CookieSigner(settings.secret_key)

    app.add_exception_handler(ApiError, api_error_handler)

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.user = current_user_optional(request)
        return await call_next(request)

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # ------------------ Projects ------------------

    @app.get("/api/projects")
    def list_projects(db: Session = Depends(get_db), user: CurrentUser = Depends(require_user)):
        return list_records(db, "project")

    @app.get("/api/projects/{project_id}")
    def get_project(project_id: int, db: Session = Depends(get_db)):
        return get_record(db, "project", project_id)

    @app.post("/api/projects", status_code=201)
    def create_project(
        payload: Payload = Body(None),
        db: Session = Depends(get_db),
        user: CurrentUser = Depends(require_user),
    ):
        return create_record(db, "project", payload, owner_id=user.id)

    # No auth on read/update/delete: matches the deployed API.
    @app.put("/api/projects/{project_id}")
    def update_project(project_id: int, payload: Payload = Body(None), db: Session = Depends(get_db)):
        return update_record(db, "project", project_id, payload)

    @app.delete("/api/projects/{project_id}")
    def delete_project(project_id: int, db: Session = Depends(get_db)):
        return delete_record(db, "project", project_id)

    # ------------------ Tasks ------------------

    @app.get("/api/tasks")
    def list_tasks(db: Session = Depends(get_db)):
        return list_records(db, "task")

    @app.get("/api/tasks/{task_id}")
    def get_task(task_id: int, db: Session = Depends(get_db)):
        return get_record(db, "task", task_id)

    @app.post("/api/tasks", status_code=201)
    def create_task(payload: Payload = Body(None), db: Session = Depends(get_db)):
        return create_record(db, "task", payload)

    @app.put("/api/tasks/{task_id}")
    def update_task(task_id: int, payload: Payload = Body(None), db: Session = Depends(get_db)):
        return update_record(db, "task", task_id, payload)

    @app.delete("/api/tasks/{task_id}")
    def delete_task(task_id: int, db: Session = Depends(get_db)):
        return delete_record(db, "task", task_id)

    # ------------------ Users ------------------

    @app.post("/api/register", status_code=201)
    def register(payload: Payload = Body(None), db: Session = Depends(get_db)):
        body = payload or {}
        try:
            u = register_user(
                db,
                username=body.get("username"),
                email=body.get("email"),
                password=body.get("password"),
            )
            user = u.public_dict()
        except Conflict:
            raise
        except Exception:
            logger.exception("Error registering user")
            raise Internal("Failed to register user")
        return {"message": "User registered successfully", "user": user}

    @app.post("/api/login")
    def login(
        request: Request,
        response: Response,
        payload: Payload = Body(None),
        db: Session = Depends(get_db),
        sessions: SessionStore = Depends(get_session_store),
    ):
        body = payload or {}
        settings: Settings = request.app.state.settings
        try:
            u = authenticate(db, body.get("email"), body.get("password"))
            if u is None:
                logger.info("Failed login attempt")
                raise CredentialInvalid(INVALID_CREDENTIALS)
            # One live session per client: a re-login replaces the old one.
            sessions.destroy(session_token(request))
            token = sessions.create(SessionData(user_id=u.id, username=u.username, email=u.email))
            user = u.public_dict()
        except CredentialInvalid:
            raise
        except Exception:
            logger.exception("Error logging in user")
            raise Internal("Failed to login")
        response.set_cookie(
            settings.cookie_name,
            request.app.state.cookie_signer.dumps(token),
            **cookie_settings(settings),
        )
        return {"message": "Login successful", "user": user}

    @app.post("/api/logout")
    def logout(request: Request, response: Response, sessions: SessionStore = Depends(get_session_store)):
        try:
            sessions.destroy(session_token(request))
        except Exception:
            logger.exception("Error destroying the session")
            raise Internal("Failed to logout")
        response.delete_cookie(request.app.state.settings.cookie_name)
        return {"message": "Logout successful"}

    @app.get("/health")
    def health():
        return {"status": "ok"}
