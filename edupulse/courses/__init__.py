"""Course catalog module.

Provides:
- Course CRUD and publication
- Ordered module lists with duration helpers
"""

from .models import COURSES_TABLES_CQL, Course, CourseLevel, Module


__all__ = [
    "COURSES_TABLES_CQL",
    "Course",
    "CourseLevel",
    "Module",
]
