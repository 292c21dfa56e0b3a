import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from database import get_db
from main import app

from .helpers import SECRET, signup


@pytest.fixture
def db():
    return mongomock.MongoClient()["storyhub_test"]


@pytest.fixture
def settings():
    return Settings(auth_secret=SECRET, token_ttl_seconds=3600)


@pytest.fixture
def client(db, settings):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def alice(client):
    return signup(client, "A", "a@x.com")


@pytest.fixture
def bob(client):
    return signup(client, "B", "b@x.com")
