import pytest

from tasktrack.auth import passwords
from tasktrack.auth.passwords import hash_password, verify_password
from tasktrack.infra.models import User
from tasktrack.infra.repository import Repository


def test_hash_is_salted_and_not_plaintext():
    h1 = hash_password("secret")
    h2 = hash_password("secret")
    assert "secret" not in h1
    assert h1.startswith("$argon2")
    assert h1 != h2


def test_verify_accepts_match_and_rejects_mismatch():
    h = hash_password("secret")
    assert verify_password(h, "secret") is True
    assert verify_password(h, "Secret") is False


def test_verify_never_raises_on_bad_input():
    assert verify_password("", "secret") is False
    assert verify_password(hash_password("x"), "") is False
    assert verify_password("not-a-hash", "secret") is False


def test_hash_rejects_empty_password():
    with pytest.raises(ValueError):
        hash_password("")


@pytest.fixture()
def cheap_hasher(monkeypatch):
    # Restored by monkeypatch at teardown
    monkeypatch.setattr(passwords, "_PH", passwords._PH)
    passwords.configure(time_cost=1, memory_cost=8 * 1024)


def test_needs_rehash_after_cost_change(cheap_hasher):
    h = hash_password("secret")
    assert passwords.needs_rehash(h) is False
    passwords.configure(time_cost=2, memory_cost=8 * 1024)
    assert passwords.needs_rehash(h) is True
    # Old hashes still verify under the new parameters
    assert verify_password(h, "secret") is True
    assert passwords.needs_rehash("not-a-hash") is True


def test_login_upgrades_outdated_hash(client, registered, db, monkeypatch):
    monkeypatch.setattr(passwords, "_PH", passwords._PH)
    stored = Repository(db, User).find_one(email="a@x.com").password
    passwords.configure(time_cost=2, memory_cost=8 * 1024)

    r = client.post("/api/login", json={"email": "a@x.com", "password": "p"})
    assert r.status_code == 200

    db.expire_all()
    upgraded = Repository(db, User).find_one(email="a@x.com").password
    assert upgraded != stored
    assert "t=2" in upgraded
    assert verify_password(upgraded, "p") is True
