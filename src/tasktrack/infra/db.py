# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # Handlers run on the threadpool, not the thread that opened the connection.
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False)


def check_connection(engine: Engine) -> bool:
    """Run a trivial query; log the outcome instead of raising."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Unable to connect to the database")
        return False
    logger.info("Connection to database established successfully.")
    return True


def init_db(engine: Engine) -> None:
    # Registers the tables on Base.metadata
    from tasktrack.infra import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Unable to create database tables")


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
