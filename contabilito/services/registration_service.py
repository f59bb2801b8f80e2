"""Registration service — create a user, and optionally their company, atomically."""

import logging
from dataclasses import dataclass
from typing import Optional

from contabilito.core.config import Settings
from contabilito.core.exceptions import (
    CompanyNameTakenError,
    ConflictError,
    EmailTakenError,
    MissingFieldError,
    StorageError,
    TermsNotAcceptedError,
    UniqueConstraintViolation,
    UsernameTakenError,
    ValidationError,
    WeakPasswordError,
)
from contabilito.core.security import BCRYPT_MAX_PASSWORD_BYTES, hash_password
from contabilito.db.store import CredentialStore, Err, Ok, Outcome, StoreHandle
from contabilito.models import CompanyRoleEnum
from contabilito.schemas.schemas import RegisterRequest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "username", "email", "password")

CONFLICTS = {
    "user.email": EmailTakenError,
    "user.username": UsernameTakenError,
    "company.name": CompanyNameTakenError,
}


@dataclass(frozen=True)
class RegistrationResult:
    user_id: int
    company_id: Optional[int] = None


def conflict_for(violation: UniqueConstraintViolation) -> ConflictError:
    """Translate a storage-level unique violation into the matching conflict."""
    error_cls = CONFLICTS.get(violation.constraint)
    if error_cls is None:
        # A fresh user cannot already hold a role; anything else is a bug.
        raise StorageError("Unexpected constraint violation") from violation
    return error_cls()


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class RegistrationService:
    """Validates sign-up input and runs the user/company/role writes as one unit."""

    @staticmethod
    def validate(request: RegisterRequest, settings: Settings) -> None:
        """Fail fast on bad input, before any storage access.

        Raises:
            MissingFieldError: a required field is absent or blank.
            ValidationError: username contains "@" or email lacks it.
            TermsNotAcceptedError: terms not accepted while the policy requires it.
            WeakPasswordError: password shorter than ``PASSWORD_MIN_LENGTH``.
        """
        missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(request, name))]
        if missing:
            raise MissingFieldError(missing)

        # Login matches either column, so the two value sets must never overlap.
        if "@" in request.username:
            raise ValidationError("Username cannot contain '@'.")
        if "@" not in request.email:
            raise ValidationError("Email address is not valid.")

        if settings.REQUIRE_TERMS_ACCEPTED and not request.terms_accepted:
            raise TermsNotAcceptedError()

        if len(request.password) < settings.PASSWORD_MIN_LENGTH:
            raise WeakPasswordError(settings.PASSWORD_MIN_LENGTH)
        if len(request.password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long."
            )

    @staticmethod
    def register(
        store: CredentialStore, request: RegisterRequest, settings: Settings
    ) -> RegistrationResult:
        """Register a user and, when ``company_name`` is given, their company.

        The user row, the company row and the owner role row are committed
        together or not at all. Conflicts found by the pre-check and those
        raised by the unique indexes (a concurrent registration winning the
        race) both roll back the whole unit.

        Raises:
            ValidationError: see :meth:`validate`.
            ConflictError: email, username or company name already taken.
            StorageError: unexpected database failure.
        """
        RegistrationService.validate(request, settings)

        password_hash = hash_password(request.password, settings.BCRYPT_ROUNDS)
        company_name = (request.company_name or "").strip()

        def work(handle: StoreHandle) -> Outcome:
            try:
                user_id = handle.insert_user({
                    "first_name": request.first_name.strip(),
                    "last_name": request.last_name.strip(),
                    "username": request.username.strip(),
                    "email": request.email,
                    "password_hash": password_hash,
                    "terms_accepted": bool(request.terms_accepted),
                })
                if not company_name:
                    return Ok(RegistrationResult(user_id=user_id))

                if handle.find_company_by_name(company_name) is not None:
                    return Err(CompanyNameTakenError())

                company_id = handle.insert_company({
                    "company_name": company_name,
                    "owner_user_id": user_id,
                })
                handle.insert_role({
                    "user_id": user_id,
                    "company_id": company_id,
                    "role": CompanyRoleEnum.owner,
                })
                return Ok(RegistrationResult(user_id=user_id, company_id=company_id))
            except UniqueConstraintViolation as exc:
                return Err(conflict_for(exc))

        try:
            outcome = store.run_in_transaction(work)
        except UniqueConstraintViolation as exc:
            # Surfaced at commit rather than at flush.
            raise conflict_for(exc) from exc

        if not outcome.ok:
            logger.info(
                "Registration rejected for username=%s: %s",
                request.username, outcome.error.message,
            )
            raise outcome.error

        result = outcome.value
        logger.info(
            "Registered user %s (id=%s, company_id=%s)",
            request.username, result.user_id, result.company_id,
        )
        return result


registration_service = RegistrationService()
