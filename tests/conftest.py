"""
pytest configuration: an app on in-memory SQLite per test, a seeded family
with known PINs and a controllable clock for the PIN lockout.
"""
import bcrypt
import pytest

from app import create_app
from config import Config
from models import db
from models.family import Family
from security.bruteforce import PinLockout, LockoutPolicy
from security.pin import hash_secret

VIEWER_PIN = "1234"
EDITOR_PIN = "12345678"
PHONE = "069123456"

OTHER_VIEWER_PIN = "4321"
OTHER_EDITOR_PIN = "87654321"
OTHER_PHONE = "078000111"

ADMIN_PASSWORD = "correct horse battery"

START_MS = 1_700_000_000_000


class AlbumTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    PIN_HASH_ROUNDS = 4
    LOCKOUT_CLEANUP_ENABLED = False
    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD_HASH = bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


def headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def pin_login(client, pin, phone=PHONE):
    body = {"pin": pin}
    if phone is not None:
        body["phoneNumber"] = phone
    return client.post("/auth/pin-login", json=body)


def _add_family(name, phone, viewer_pin, editor_pin) -> int:
    family = Family(
        name=name,
        phone_number=phone,
        viewer_pin_hash=hash_secret(viewer_pin),
        editor_pin_hash=hash_secret(editor_pin),
    )
    db.session.add(family)
    db.session.commit()
    return family.id


# ---------------------------------------------------------------------------
# App and client
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(clock):
    app = create_app(AlbumTestConfig)
    with app.app_context():
        db.create_all()
        app.extensions["pin_lockout"] = PinLockout(LockoutPolicy.from_config(app.config), clock=clock)
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def lockout(app):
    return app.extensions["pin_lockout"]


# ---------------------------------------------------------------------------
# Families and tokens
# ---------------------------------------------------------------------------

@pytest.fixture
def family_id(app) -> int:
    return _add_family("Popescu", PHONE, VIEWER_PIN, EDITOR_PIN)


@pytest.fixture
def other_family_id(app) -> int:
    return _add_family("Ionescu", OTHER_PHONE, OTHER_VIEWER_PIN, OTHER_EDITOR_PIN)


@pytest.fixture
def viewer_headers(client, family_id) -> dict:
    resp = pin_login(client, VIEWER_PIN)
    assert resp.status_code == 200, resp.get_json()
    return headers(resp.get_json()["token"])


@pytest.fixture
def editor_headers(client, family_id) -> dict:
    resp = pin_login(client, EDITOR_PIN)
    assert resp.status_code == 200, resp.get_json()
    return headers(resp.get_json()["token"])


@pytest.fixture
def other_editor_headers(client, other_family_id) -> dict:
    resp = pin_login(client, OTHER_EDITOR_PIN, phone=OTHER_PHONE)
    assert resp.status_code == 200, resp.get_json()
    return headers(resp.get_json()["token"])


@pytest.fixture
def admin_headers(client) -> dict:
    resp = client.post("/admin/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    return headers(resp.get_json()["token"])
