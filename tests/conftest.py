"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from contabilito.core.config import Settings
from contabilito.db.store import CredentialStore


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file, with cheap bcrypt rounds."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'contabilito-test.db'}",
        BCRYPT_ROUNDS=4,
        JWT_SECRET="test-secret",
    )


@pytest.fixture
def store(settings):
    """Isolated, provisioned credential store."""
    store = CredentialStore(settings.DATABASE_URL).open()
    store.ensure_schema()
    yield store
    store.close()


@pytest.fixture
def client(settings, store):
    """Test client bound to the isolated store."""
    from contabilito.main import create_app

    with TestClient(create_app(settings, store)) as client:
        yield client


@pytest.fixture
def registration_payload():
    """Valid sign-up body without a company."""
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": "secret1",
        "termsAccepted": True,
    }
