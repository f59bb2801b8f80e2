"""Custom exception classes for Contabilito."""

from fastapi import HTTPException, status


class ContabilitoError(Exception):
    """Base exception for Contabilito."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ValidationError(ContabilitoError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class MissingFieldError(ValidationError):
    """Raised when required registration fields are absent or blank."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__("All required user fields must be completed.")


class TermsNotAcceptedError(ValidationError):
    def __init__(self):
        super().__init__("You must accept the Terms and Conditions.")


class WeakPasswordError(ValidationError):
    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(f"Password must be at least {min_length} characters long.")


class MissingCredentialsError(ValidationError):
    def __init__(self):
        super().__init__("Username/email and password are required.")


class ConflictError(ContabilitoError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class EmailTakenError(ConflictError):
    def __init__(self):
        super().__init__("This email is already registered.")


class UsernameTakenError(ConflictError):
    def __init__(self):
        super().__init__("This username is already in use.")


class CompanyNameTakenError(ConflictError):
    def __init__(self):
        super().__init__("A company with this name already exists.")


class AuthenticationError(ContabilitoError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentialsError(AuthenticationError):
    """Same message for unknown identifiers and wrong passwords."""

    def __init__(self):
        super().__init__("Invalid credentials.")


class AuthorizationError(ContabilitoError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(ContabilitoError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(ContabilitoError):
    """Raised when a database operation fails unexpectedly."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UniqueConstraintViolation(Exception):
    """Raised by the credential store when a unique index rejects a write.

    ``constraint`` is one of ``user.email``, ``user.username``,
    ``company.name`` or ``user_company_role.user_company``.
    """

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"Unique constraint violated: {constraint}")


# HTTP exception shortcuts
def not_found(detail: str = "Resource not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def forbidden(detail: str = "Insufficient permissions") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def bad_request(detail: str = "Bad request") -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def conflict(detail: str = "Resource already exists") -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def server_error(detail: str = "Internal server error") -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
