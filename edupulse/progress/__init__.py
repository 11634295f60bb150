"""Enrollment and progress tracking module.

Provides:
- Course enrollment management with per-pair uniqueness
- Module completion toggles and percentage computation
- Cascading cleanup for deleted courses and students
"""

from .models import PROGRESS_TABLES_CQL, Enrollment, ModuleProgress


__all__ = [
    "PROGRESS_TABLES_CQL",
    "Enrollment",
    "ModuleProgress",
]
