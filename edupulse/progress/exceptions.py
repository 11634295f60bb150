"""Enrollment and progress errors."""

from edupulse.core.exceptions import ConflictError, NotFoundError


class EnrollmentNotFoundError(NotFoundError):
    """Enrollment not found."""

    def __init__(self, message: str = "Enrollment not found"):
        super().__init__(message, "enrollment_not_found")


class ModuleProgressNotFoundError(NotFoundError):
    """Module is not part of the enrollment's progress list."""

    def __init__(self, message: str = "Module not found in enrollment"):
        super().__init__(message, "module_not_found")


class AlreadyEnrolledError(ConflictError):
    """Student already enrolled in the course."""

    def __init__(self, message: str = "Already enrolled in this course"):
        super().__init__(message, "already_enrolled")


class ConcurrentUpdateError(ConflictError):
    """Progress kept changing underneath the update."""

    def __init__(self, message: str = "Enrollment was modified concurrently"):
        super().__init__(message, "concurrent_update")
