"""Domain and infrastructure error types.

Every error carries a machine-readable ``kind`` so clients can tell
"retry later" apart from "fix your input" and "setup required".
"""
from fastapi import status
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, ProgrammingError


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "ERROR"
    retryable: bool = False

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "VALIDATION_ERROR"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "NOT_AUTHENTICATED"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "PERMISSION_DENIED"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NOT_FOUND"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    kind = "CONFLICT"


class ProfileProvisioningError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "PROFILE_CREATION_FAILED"


class SetupRequiredError(AppError):
    """Schema is missing; needs migrations, a retry will not help."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "SETUP_REQUIRED"


class StoreUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "STORE_UNAVAILABLE"
    retryable = True


# SQLSTATE codes / driver messages that mean the schema has not been migrated
_MISSING_SCHEMA_CODES = {"42P01", "42703"}
_MISSING_SCHEMA_MARKERS = ("no such table", "no such column", "does not exist")


def classify_db_error(exc: DBAPIError) -> AppError:
    """Map a raw driver error onto the setup/transient taxonomy."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig or exc).lower()
    if code in _MISSING_SCHEMA_CODES or any(marker in text for marker in _MISSING_SCHEMA_MARKERS):
        return SetupRequiredError("Database schema is missing. Run migrations (alembic upgrade head).")
    if isinstance(exc, (OperationalError, InterfaceError)) or exc.connection_invalidated:
        return StoreUnavailableError("Database is unreachable, try again later.")
    if isinstance(exc, ProgrammingError):
        return SetupRequiredError("Database schema does not match the application.")
    return AppError("Unexpected database error.", kind="STORE_ERROR")


def error_body(err: AppError) -> dict:
    return {"detail": err.message, "kind": err.kind, "retryable": err.retryable}
