"""Application error taxonomy.

Services raise these errors and ``main.create_app`` turns them into the JSON
error body. Each kind carries its HTTP status and a machine readable code.
"""

from fastapi import status


class AppError(Exception):
    """Base application error."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "app_error") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    """A referenced course, enrollment, module or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found", code: str = "not_found"):
        super().__init__(message, code)


class AccessDeniedError(AppError):
    """The caller's role or ownership does not permit the operation."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied", code: str = "access_denied"):
        super().__init__(message, code)


class ConflictError(AppError):
    """Uniqueness violation or an unresolved concurrent update."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Conflict", code: str = "conflict"):
        super().__init__(message, code)


class ValidationFailedError(AppError):
    """Input that passed schema validation but breaks a domain rule."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self, message: str = "Validation failed", code: str = "validation_failed"
    ):
        super().__init__(message, code)


class InternalError(AppError):
    """Unexpected persistence or invariant failure."""

    def __init__(self, message: str = "Internal error", code: str = "internal_error"):
        super().__init__(message, code)
