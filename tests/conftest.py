"""Pytest configuration and shared fixtures."""

import pytest

from cacahuete import create_app
from cacahuete.services.store import RecordStore
from cacahuete.settings import get_settings


PARTICIPANTS = ("GrandPa", "GrandMa", "Arnaud", "Julie", "Valérie", "Maxime", "Fanny", "Corentin")
RESET_CODE = "test-reset-code"


def make_app(**overrides):
    config = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "WTF_CSRF_ENABLED": False,
        "CACAHUETE_PARTICIPANTS": PARTICIPANTS,
        "CACAHUETE_STORAGE_KEY": "test_record",
        "CACAHUETE_RESET_CODE": RESET_CODE,
        "CACAHUETE_EXPIRES_AT": "2999-01-01T00:00:00+00:00",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app():
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def settings(app):
    with app.app_context():
        yield get_settings()


@pytest.fixture
def store(app):
    with app.app_context():
        yield RecordStore(app.config["CACAHUETE_STORAGE_KEY"])


@pytest.fixture
def app_factory():
    return make_app
