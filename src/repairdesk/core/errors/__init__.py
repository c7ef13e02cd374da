"""Error handling module with RFC 7807 Problem Details."""

from repairdesk.core.errors.exceptions import (
    AppException,
    ConstraintViolationError,
    NotFoundError,
    SchemaDriftError,
    ServiceUnavailableError,
    TransientConnectionError,
    UnauthorizedError,
    ValidationError,
)
from repairdesk.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "ConstraintViolationError",
    "FieldError",
    "NotFoundError",
    "ProblemDetail",
    "SchemaDriftError",
    "ServiceUnavailableError",
    "TransientConnectionError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
