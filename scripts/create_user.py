#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from tasktrack.auth.users import register_user
from tasktrack.config import load_settings
from tasktrack.errors import Conflict
from tasktrack.infra.db import init_db, make_engine, make_session_factory


def main() -> None:
    settings = load_settings()
    engine = make_engine(settings.database_url)
    init_db(engine)

    username = input("Username: ").strip()
    email = input("Email: ").strip()

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    db = make_session_factory(engine)()
    try:
        u = register_user(db, username=username, email=email, password=pw1)
    except Conflict as e:
        raise SystemExit(e.message)
    finally:
        db.close()
    print(f"OK -> user {u.id} <{email}> in {settings.database_url}")


if __name__ == "__main__":
    main()
