"""Course catalog errors."""

from edupulse.core.exceptions import NotFoundError


class CourseNotFoundError(NotFoundError):
    """Course not found."""

    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")
