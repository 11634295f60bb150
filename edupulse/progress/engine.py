"""Progress computation.

Pure functions: they never touch storage and never mutate their inputs.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from edupulse.progress.exceptions import ModuleProgressNotFoundError
from edupulse.progress.models import Enrollment, ModuleProgress


COMPLETE_PERCENTAGE = 100


def calculate_percentage(completed: int, total: int) -> int:
    """Return ``100 * completed / total`` rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def progress_percentage(progress: list[ModuleProgress]) -> int:
    completed = sum(1 for entry in progress if entry.completed)
    return calculate_percentage(completed, len(progress))


def seed_progress(module_ids: Iterable[UUID]) -> list[ModuleProgress]:
    """One incomplete entry per module, in the given order."""
    return [ModuleProgress(module_id=module_id) for module_id in module_ids]


def is_complete(enrollment: Enrollment) -> bool:
    return enrollment.progress_percentage == COMPLETE_PERCENTAGE


def apply_completion(
    enrollment: Enrollment,
    module_id: UUID,
    completed: bool,
    now: datetime | None = None,
) -> Enrollment:
    """Return a copy of ``enrollment`` with one module's flag set.

    A false to true transition stamps ``completed_at``; true to false clears
    it; setting the current value again leaves the entry untouched. The
    percentage and the enrollment ``completed_at`` are recomputed.

    Raises:
        ModuleProgressNotFoundError: If the module is not in the progress list
    """
    now = now or datetime.now(UTC)
    updated = enrollment.copy()

    entry = next((e for e in updated.progress if e.module_id == module_id), None)
    if entry is None:
        raise ModuleProgressNotFoundError

    if completed and not entry.completed:
        entry.completed = True
        entry.completed_at = now
    elif not completed and entry.completed:
        entry.completed = False
        entry.completed_at = None

    updated.progress_percentage = progress_percentage(updated.progress)
    if is_complete(updated):
        updated.completed_at = updated.completed_at or now
    else:
        updated.completed_at = None

    return updated
