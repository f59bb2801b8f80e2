"""FastAPI dependencies exposing the app's credential store and settings."""

from fastapi import Request

from contabilito.core.config import Settings
from contabilito.db.store import CredentialStore


def get_store(request: Request) -> CredentialStore:
    """The store opened by the application lifespan."""
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
