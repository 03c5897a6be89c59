import mongomock
import pytest
from fastapi.testclient import TestClient

from school_chat.core.config import Settings
from school_chat.database import Database
from school_chat.main import create_app
from school_chat.services import ServiceRegistry


@pytest.fixture
def db():
    database = Database.from_client(mongomock.MongoClient(), "school-chat-test")
    database.ensure_indexes()
    return database


@pytest.fixture
def services(db):
    return ServiceRegistry(db)


@pytest.fixture
def make_user(services):
    """Create a user and log them in; returns ``(user_id, token)``."""
    counter = {"n": 0}

    def _make_user(username=None, teacher=False, password="secret"):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        created = services.users.create_user(
            username=username,
            real_name=username.title(),
            email=f"{username}@school.org",
            password=password,
            year=10,
            class_letter="B",
            teacher=teacher,
        )
        assert created.ok, created
        login = services.users.login(password=password, username=username)
        assert login.ok, login
        return created.value, login.value.id

    return _make_user


@pytest.fixture
def client():
    settings = Settings(DATABASE_NAME="school-chat-api-test", LOG_LEVEL="WARNING")
    app = create_app(settings=settings, client=mongomock.MongoClient())
    with TestClient(app) as test_client:
        yield test_client
