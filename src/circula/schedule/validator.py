"""Per-task validation against the current schedule."""

from collections.abc import Iterable

from circula.schedule import clock
from circula.schedule.models import Diagnostic, Task, TaskCandidate, ValidationResult

MAX_TITLE_LENGTH = 100
MAX_NOTES_LENGTH = 500
MAX_DURATION_HOURS = 12.0
MIN_DURATION_HOURS = 0.25
MIN_BUFFER_HOURS = 0.25
ENERGY_LEVELS = (1, 2, 3)


def _error(field: str, message: str) -> Diagnostic:
    return Diagnostic(field=field, message=message, severity="error")


def _warning(field: str, message: str) -> Diagnostic:
    return Diagnostic(field=field, message=message, severity="warning")


def validate_task(
    candidate: TaskCandidate,
    existing_tasks: Iterable[Task],
    exclude_id: str | None = None,
) -> ValidationResult:
    """Validate a candidate task against a schedule snapshot.

    Every check runs and its diagnostics accumulate; only the time checks
    depend on each other (they need both bounds). Errors block a save,
    warnings are advisory.

    Args:
        candidate: Task under edit, possibly partial
        existing_tasks: Current schedule, in any order
        exclude_id: Id of the task being edited, so it never conflicts
            with its own stored version

    Returns:
        ValidationResult with errors and warnings
    """
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    title = candidate.title
    if title is None or not title.strip():
        errors.append(_error("title", "Task title is required"))
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append(
            _error("title", f"Task title must be {MAX_TITLE_LENGTH} characters or less")
        )

    if candidate.start_time is None:
        errors.append(_error("start_time", "Start time is required"))
    if candidate.end_time is None:
        errors.append(_error("end_time", "End time is required"))

    if candidate.start_time is not None and candidate.end_time is not None:
        others = [t for t in existing_tasks if t.id != exclude_id]
        time_errors, time_warnings = _check_time_range(
            candidate.start_time, candidate.end_time, others
        )
        errors.extend(time_errors)
        warnings.extend(time_warnings)

    if candidate.notes and len(candidate.notes) > MAX_NOTES_LENGTH:
        errors.append(_error("notes", f"Notes must be {MAX_NOTES_LENGTH} characters or less"))

    if candidate.energy_level is not None and candidate.energy_level not in ENERGY_LEVELS:
        errors.append(_error("energy_level", "Energy level must be between 1 and 3"))

    return ValidationResult(errors=errors, warnings=warnings)


def _check_time_range(
    start: float, end: float, others: list[Task]
) -> tuple[list[Diagnostic], list[Diagnostic]]:
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    length = clock.duration(start, end)
    if length <= 0:
        errors.append(_error("end_time", "End time must be after start time"))
    elif length > MAX_DURATION_HOURS:
        warnings.append(
            _warning("duration", "Tasks longer than 12 hours may be too ambitious")
        )
    elif length < MIN_DURATION_HOURS:
        warnings.append(
            _warning("duration", "Very short tasks (under 15 minutes) may be hard to complete")
        )

    # Overlap and adjacency still run after a duration error
    overlapping = [t for t in others if clock.overlaps(start, end, t.start_time, t.end_time)]
    if overlapping:
        count = len(overlapping)
        plural = "s" if count > 1 else ""
        warnings.append(_warning("time", f"This task overlaps with {count} other task{plural}"))
        return errors, warnings

    end_effective = clock.effective_end(start, end)
    for other in others:
        other_end = clock.effective_end(other.start_time, other.end_time)
        if (
            clock.gap(other_end, start) < MIN_BUFFER_HOURS
            or clock.gap(end_effective, other.start_time) < MIN_BUFFER_HOURS
        ):
            warnings.append(
                _warning(
                    "time",
                    "This task is very close to other tasks - consider adding buffer time",
                )
            )
            break

    return errors, warnings
