import pytest

from api.src.db import LogDatabase
from api.src.web import create_app


@pytest.fixture
def database():
    db = LogDatabase.from_url("sqlite://")
    db.init()
    return db


@pytest.fixture
def app(database):
    application = create_app(database)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_log():
    return {
        "category": "exec",
        "action": "tool:bash:start",
        "details": {"toolCallId": "c1", "raw": "tool start: tool=bash toolCallId=c1"},
        "timestamp": "2026-10-17T09:00:00.000Z",
    }
