"""Application error taxonomy and user-facing error descriptions.

Validation and authorization failures are raised at the point of use and
converted to JSON responses by the handlers registered in ``app.main``.
Database failures are wrapped in :class:`DataAccessError`, whose message is
remapped from known PostgreSQL error codes so raw driver text never reaches
a client.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError


class AppError(Exception):
    """Base class for errors that carry a user-facing message."""

    title = "Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Bad input to a form field or a role transition."""

    title = "Validation Error"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class AuthenticationError(AppError):
    """No valid session."""

    title = "Authentication Required"

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)


class AuthorizationError(AppError):
    """Session present but the held roles are insufficient."""

    title = "Access Denied"

    def __init__(
        self,
        message: str = "Access denied",
        required_roles: list[str] | None = None,
        current_role: str | None = None,
    ):
        self.required_roles = required_roles or []
        self.current_role = current_role
        super().__init__(message)


# (code, substring, user-facing message). Codes are SQLSTATE values as
# surfaced by asyncpg; PGRST116 is what the hosted REST layer reports for an
# expired JWT.
_KNOWN_DB_ERRORS: tuple[tuple[str, str, str], ...] = (
    ("23505", "duplicate key value", "This item already exists"),
    ("23503", "violates foreign key constraint", "Referenced item not found"),
    ("42501", "permission denied", "Permission denied"),
    ("PGRST116", "JWT", "Session expired. Please sign in again."),
)

_GENERIC_DB_MESSAGE = "Unable to complete your request. Please try again."


def _error_code(exc: BaseException) -> str | None:
    """Dig the SQLSTATE out of a SQLAlchemy ``DBAPIError`` or a driver error."""
    for candidate in (getattr(exc, "orig", None), exc):
        if candidate is None:
            continue
        for attr in ("sqlstate", "pgcode"):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code:
                return code
    # SQLAlchemy's own ``code`` is a docs link key, not a SQLSTATE
    if not isinstance(exc, SQLAlchemyError):
        code = getattr(exc, "code", None)
        if isinstance(code, str) and code:
            return code
    return None


class DataAccessError(AppError):
    """A persistence call failed."""

    title = "Database Error"

    def __init__(self, message: str = _GENERIC_DB_MESSAGE, code: str | None = None):
        self.code = code
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "DataAccessError":
        """Wrap *exc*, remapping known error codes to friendly messages."""
        code = _error_code(exc)
        text = str(exc)
        for known_code, substring, message in _KNOWN_DB_ERRORS:
            if code == known_code or substring in text:
                return cls(message, code=code or known_code)
        return cls(code=code)


@dataclass(frozen=True)
class ErrorNotice:
    """What a client should show the user for a failed operation."""

    title: str
    description: str


def describe_error(exc: BaseException, fallback: str = "An unexpected error occurred") -> ErrorNotice:
    """Map any exception to a notice suitable for display."""
    if isinstance(exc, DataAccessError):
        return ErrorNotice(exc.title, exc.message)
    if isinstance(exc, AppError):
        return ErrorNotice(exc.title, exc.message)

    text = str(exc)
    if "JWT" in text:
        return ErrorNotice("Session Expired", "Please sign in again to continue.")
    if "violates foreign key constraint" in text:
        return ErrorNotice("Invalid Reference", "The requested item could not be found.")
    if "duplicate key value" in text:
        return ErrorNotice("Duplicate Entry", "This item already exists.")
    if "permission denied" in text:
        return ErrorNotice(
            "Permission Denied", "You do not have permission to perform this action."
        )
    return ErrorNotice("Error", fallback)
