"""
Tests for the database manager's connection handling.
"""

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

import app.database as database
from app.database import DatabaseManager


class UnreachableClient:
    """MongoClient stand-in whose ping always times out."""

    instances = 0

    def __init__(self, *args, **kwargs):
        type(self).instances += 1
        self.admin = self

    def command(self, name):
        raise ServerSelectionTimeoutError("no servers available")

    def close(self):
        pass


@pytest.fixture
def unreachable(monkeypatch):
    UnreachableClient.instances = 0
    monkeypatch.setattr(database, "MongoClient", UnreachableClient)
    return UnreachableClient


@pytest.fixture
def manager():
    manager = DatabaseManager()
    manager._retry_delay = 0
    return manager


class TestConnect:

    def test_failed_round_uses_every_retry(self, manager, unreachable):
        assert manager.connect() is False
        assert unreachable.instances == manager._max_retries
        assert manager.check_health()["status"] == "disconnected"

    def test_no_new_attempts_during_cooldown(self, manager, unreachable):
        manager.connect()

        assert manager.connect() is False
        with pytest.raises(ConnectionError):
            manager.get_database()
        assert unreachable.instances == manager._max_retries

    def test_retries_again_after_cooldown(self, manager, unreachable):
        manager.connect()
        manager._retry_cooldown = 0

        manager.connect()

        assert unreachable.instances == 2 * manager._max_retries

    def test_bound_database_clears_failure(self, manager, unreachable):
        manager.connect()
        db = mongomock.MongoClient(tz_aware=True)["salons_chat_test"]

        manager.use_database(db)

        assert manager.connect() is True
        assert manager.get_database() is db
        assert "code_unique" in db.rooms.index_information()
