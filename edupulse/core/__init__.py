# Core infrastructure
from edupulse.core.context import (
    clear_context,
    get_context,
    get_request_id,
    get_user_id,
    set_request_id,
    set_user_id,
)
from edupulse.core.exceptions import (
    AccessDeniedError,
    AppError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationFailedError,
)
from edupulse.core.logging import configure_structlog, get_logger
from edupulse.core.middleware import RequestContextMiddleware


__all__ = [
    "AccessDeniedError",
    "AppError",
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "RequestContextMiddleware",
    "ValidationFailedError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_user_id",
    "set_request_id",
    "set_user_id",
]
