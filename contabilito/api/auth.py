"""Auth API router — register and login."""

import logging

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from contabilito.core.config import Settings
from contabilito.core.exceptions import (
    AuthenticationError, ConflictError, StorageError, ValidationError,
    bad_request, conflict, server_error, unauthorized,
)
from contabilito.db.session import get_settings, get_store
from contabilito.db.store import CredentialStore
from contabilito.schemas.schemas import (
    LoginRequest, LoginResponse, RegisterRequest, RegisterResponse,
)
from contabilito.services.auth_service import auth_service
from contabilito.services.registration_service import registration_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    store: CredentialStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Register a user, optionally creating a company they own."""
    # bcrypt is CPU-bound; keep it off the event loop.
    try:
        result = await run_in_threadpool(registration_service.register, store, body, settings)
    except ValidationError as e:
        raise bad_request(e.message)
    except ConflictError as e:
        raise conflict(e.message)
    except StorageError:
        logger.exception("Error registering user/company")
        raise server_error("Error registering user/company in the database.")

    message = "User registered successfully" + (
        " and company created." if result.company_id else "."
    )
    return RegisterResponse(
        message=message,
        user_id=result.user_id,
        company_id=result.company_id,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    store: CredentialStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Authenticate by email or username."""
    try:
        result = await run_in_threadpool(
            auth_service.login, store, body.identifier, body.password, settings
        )
    except ValidationError as e:
        raise bad_request(e.message)
    except AuthenticationError as e:
        raise unauthorized(e.message)
    except StorageError:
        logger.exception("Error during login")
        raise server_error("Internal server error during login.")

    return LoginResponse(message="Login successful.", **result)
