"""
Test configuration and fixtures.

Every test gets a fresh in-memory MongoDB (mongomock) bound to the global
database manager, a Flask app wired to it, and a few user records standing
in for accounts owned by the authentication service.
"""

import mongomock
import pytest

from app.core.auth import issue_access_token
from app.database import db_manager
from app.flask_main import create_app
from app.services import rooms

TEST_JWT_SECRET = "test-secret-key-for-the-room-chat-api-0123456789"


@pytest.fixture
def db():
    client = mongomock.MongoClient(tz_aware=True)
    database = client["salons_chat_test"]
    db_manager.use_database(database)
    yield database
    db_manager.disconnect()


@pytest.fixture
def app(db):
    return create_app({"TESTING": True, "JWT_SECRET_KEY": TEST_JWT_SECRET}, database=db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    """Insert a user record and return its id as a string."""
    def _make_user(username):
        result = db.users.insert_one({
            "username": username,
            "email": f"{username}@example.com",
            "avatar": None,
            "is_online": False,
            "rooms": [],
        })
        return str(result.inserted_id)
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user id."""
    def _auth_headers(user_id):
        with app.app_context():
            token = issue_access_token(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def team_room(db, alice, bob):
    """Room created by alice, joined by bob."""
    room = rooms.create_room(db, alice, name="Team", code="TEAM01")
    rooms.join_room(db, bob, "team01")
    return room
