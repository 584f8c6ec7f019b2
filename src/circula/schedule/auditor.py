"""Whole-day checks over the schedule."""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from circula.schedule import clock
from circula.schedule.models import Diagnostic, Task, ValidationResult

MAX_TASKS_PER_DAY = 20
MAX_SCHEDULED_HOURS = 16.0
MIN_BREAK_HOURS = 0.25


@dataclass(frozen=True)
class ScheduleSummary:
    """Aggregate numbers for the analytics view."""

    task_count: int
    completed_count: int
    total_hours: float
    hours_by_category: dict[str, float]
    average_energy: float | None


def total_hours(tasks: Sequence[Task]) -> float:
    """Sum of wraparound-aware durations."""
    return sum(clock.duration(t.start_time, t.end_time) for t in tasks)


def audit_schedule(tasks: Sequence[Task]) -> ValidationResult:
    """Produce day-level health warnings. Never produces errors.

    The break check reports only the first tight gap it finds.
    """
    warnings: list[Diagnostic] = []

    if len(tasks) > MAX_TASKS_PER_DAY:
        warnings.append(
            Diagnostic(
                field="schedule",
                message="You have many tasks scheduled - consider prioritizing",
                severity="warning",
            )
        )

    if total_hours(tasks) > MAX_SCHEDULED_HOURS:
        warnings.append(
            Diagnostic(
                field="schedule",
                message="You have over 16 hours scheduled - this may be unsustainable",
                severity="warning",
            )
        )

    ordered = sorted(tasks, key=lambda t: t.start_time)
    for prev, current in zip(ordered, ordered[1:]):
        between = current.start_time - clock.effective_end(prev.start_time, prev.end_time)
        if 0 < between < MIN_BREAK_HOURS:
            warnings.append(
                Diagnostic(
                    field="breaks",
                    message="Consider adding breaks between consecutive tasks",
                    severity="warning",
                )
            )
            break

    return ValidationResult(errors=[], warnings=warnings)


def summarize_schedule(tasks: Sequence[Task]) -> ScheduleSummary:
    """Totals per day and per category."""
    by_category: dict[str, float] = defaultdict(float)
    for task in tasks:
        by_category[task.category] += clock.duration(task.start_time, task.end_time)

    average_energy = None
    if tasks:
        average_energy = round(sum(t.energy_level for t in tasks) / len(tasks), 2)

    return ScheduleSummary(
        task_count=len(tasks),
        completed_count=sum(1 for t in tasks if t.completed),
        total_hours=total_hours(tasks),
        hours_by_category=dict(by_category),
        average_energy=average_energy,
    )
