"""Auth service — credential check and access token issue."""

import logging
from typing import Any, Dict

from contabilito.core.config import Settings
from contabilito.core.exceptions import InvalidCredentialsError, MissingCredentialsError
from contabilito.core.security import create_access_token, dummy_hash, verify_password
from contabilito.db.store import CredentialStore
from contabilito.models import User

logger = logging.getLogger(__name__)


def sanitize_user(user: User, memberships: list) -> Dict[str, Any]:
    """Public view of a user: no password hash, no reset-token fields."""
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "created_at": user.created_at,
        "companies": memberships,
    }


class AuthService:
    """Handles authentication."""

    @staticmethod
    def login(
        store: CredentialStore, identifier: str, password: str, settings: Settings
    ) -> Dict[str, Any]:
        """Authenticate by email or username and return the user view plus a token.

        Unknown identifiers and wrong passwords raise the same error, and both
        pay for one bcrypt comparison.

        Raises:
            MissingCredentialsError: identifier or password missing.
            InvalidCredentialsError: no such user, or wrong password.
        """
        if not identifier or not identifier.strip() or not password:
            raise MissingCredentialsError()

        user = store.find_user_by_identifier(identifier)
        if user is None:
            verify_password(password, dummy_hash(settings.BCRYPT_ROUNDS))
            logger.info("Login failed: unknown identifier")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed for user id=%s: wrong password", user.id)
            raise InvalidCredentialsError()

        memberships = store.list_memberships(user.id)
        token_data = {
            "sub": str(user.id),
            "username": user.username,
            "companies": [m["company_id"] for m in memberships],
        }
        access_token = create_access_token(token_data, settings)

        logger.info("User id=%s logged in", user.id)
        return {
            "user": sanitize_user(user, memberships),
            "access_token": access_token,
            "token_type": "bearer",
        }


auth_service = AuthService()
