"""
QnA Backend — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for every failure the service reports.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services, dependencies and routes; caught by global handlers.

Exception Hierarchy:
    QnAError (base)
    ├── ValidationError                   → 400 Bad Request
    │   └── PaginationError
    ├── NotFoundError                     → 404 Not Found
    │   └── QuestionNotFoundError
    ├── UnauthorizedError                 → 401 Unauthorized
    │   ├── CannotDecryptTokenError
    │   └── WrongCredentialsError
    ├── ExternalAPIError                  → 500 Internal Server Error
    │   ├── CensorClientError             (remote answered 4xx)
    │   ├── CensorServerError             (remote answered 5xx)
    │   └── CensorDeserializationError    (body matched no known shape)
    └── DatabaseError
        └── DatabaseQueryError            → 422 (constraint) / 500 (other)
"""

from typing import Any, Dict, Optional


class QnAError(Exception):
    """
    Base exception for all QnA application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Client input
# ══════════════════════════════════════════════════════════════════════════

class ValidationError(QnAError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request. Schema-level body validation stays with FastAPI
    (422); this class covers inputs parsed by hand, such as query strings.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class PaginationError(ValidationError):
    """Raised when `offset` or `limit` is not a non-negative integer."""

    def __init__(self, field: str, value: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"invalid pagination parameters: '{field}' must be a non-negative integer",
            field=field,
            context={**(context or {}), "value": value},
        )
        self.value = value


# ══════════════════════════════════════════════════════════════════════════
# Resources
# ══════════════════════════════════════════════════════════════════════════

class NotFoundError(QnAError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class QuestionNotFoundError(NotFoundError):
    """No question with the given id exists (or none the caller may mutate)."""

    def __init__(self, question_id: int, context: Optional[Dict[str, Any]] = None):
        super().__init__(resource="question", resource_id=str(question_id), context=context)
        self.question_id = question_id


# ══════════════════════════════════════════════════════════════════════════
# Authentication & authorization
# ══════════════════════════════════════════════════════════════════════════

class UnauthorizedError(QnAError):
    """
    Raised when the caller may not perform the operation.

    Covers a missing session as well as an ownership mismatch: an account
    tried to update or delete a question it did not create.
    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        message: str = "unauthorized, no permission to modify the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CannotDecryptTokenError(UnauthorizedError):
    """
    The session token could not be verified.

    Tampered, malformed, expired and not-yet-valid tokens all end up here.
    The concrete reason goes into `context["reason"]` for the logs only.
    """

    def __init__(self, reason: str = "invalid", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="auth token could not be deciphered",
            context={**(context or {}), "reason": reason},
        )
        self.reason = reason


class WrongCredentialsError(UnauthorizedError):
    """Unknown email or wrong password on login. Both look the same to the client."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="wrong credentials combination", context=context)


# ══════════════════════════════════════════════════════════════════════════
# External censoring API
# ══════════════════════════════════════════════════════════════════════════

class ExternalAPIError(QnAError):
    """
    Raised when the profanity censoring API could not be used.

    The base class itself means the transport kept failing after every
    retry attempt (connection refused, timeout, ...).
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "external API error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CensorClientError(ExternalAPIError):
    """
    The censor API rejected our request with a 4xx status.

    Typical causes: bad API key, malformed body. Not retried.
    """

    def __init__(self, status_code: int, remote_message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="external client error",
            context={**(context or {}), "status_code": status_code, "remote_message": remote_message},
        )
        self.status_code = status_code
        self.remote_message = remote_message


class CensorServerError(ExternalAPIError):
    """The censor API failed on its side (5xx or any other non-success status)."""

    def __init__(self, status_code: int, remote_message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="external server error",
            context={**(context or {}), "status_code": status_code, "remote_message": remote_message},
        )
        self.status_code = status_code
        self.remote_message = remote_message


class CensorDeserializationError(ExternalAPIError):
    """The censor API body matched neither the result shape nor the error shape."""

    def __init__(self, status_code: int, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="external API returned an unreadable response",
            context={**(context or {}), "status_code": status_code},
        )
        self.status_code = status_code


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

# PostgreSQL SQLSTATE codes with a client-safe message each
UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"
FOREIGN_KEY_VIOLATION = "23503"

PG_ERROR_MESSAGES: Dict[str, str] = {
    UNIQUE_VIOLATION: "duplicate data",
    CHECK_VIOLATION: "invalid data: constraint violation",
    FOREIGN_KEY_VIOLATION: "referenced data does not exist",
}
DEFAULT_DB_ERROR_MESSAGE = "cannot update data"


def default_error_message(code: Optional[str]) -> str:
    """Maps a SQLSTATE code to the message shown to API consumers."""
    if code is None:
        return DEFAULT_DB_ERROR_MESSAGE
    return PG_ERROR_MESSAGES.get(code, DEFAULT_DB_ERROR_MESSAGE)


class DatabaseError(QnAError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; driver details
    are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseQueryError(DatabaseError):
    """
    Wraps a failed SQL statement.

    Attributes:
        code:                  SQLSTATE reported by the driver, when there is one
        constraint_violation:  True for integrity errors (unique, check, foreign key)

    HTTP: 422 for constraint violations, 500 otherwise.
    """

    def __init__(
        self,
        code: Optional[str] = None,
        constraint_violation: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=default_error_message(code),
            context={**(context or {}), "sqlstate": code},
        )
        self.code = code
        self.constraint_violation = constraint_violation

    @classmethod
    def from_sqlalchemy(cls, error: Exception, **context: Any) -> "DatabaseQueryError":
        """
        Builds the error from a SQLAlchemy exception.

        asyncpg errors expose the SQLSTATE as `sqlstate` (psycopg uses `pgcode`)
        on the DBAPI exception wrapped in `error.orig`.
        """
        from sqlalchemy.exc import IntegrityError

        orig = getattr(error, "orig", None)
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        context.setdefault("error_type", type(error).__name__)
        return cls(
            code=code,
            constraint_violation=isinstance(error, IntegrityError),
            context=context,
        )
