"""Turn timeline picks and templates into task candidates."""

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from circula.schedule import clock
from circula.schedule.models import (
    DEFAULT_CATEGORY,
    DEFAULT_ENERGY_LEVEL,
    Category,
    Task,
    TaskCandidate,
)

IdFactory = Callable[[], str]


def new_task_id() -> str:
    """Generate a globally unique task id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class QuickTemplate:
    """One-tap task preset."""

    label: str
    category: str
    duration: float  # Hours


QUICK_TEMPLATES: tuple[QuickTemplate, ...] = (
    QuickTemplate("Deep Work", Category.FOCUS.value, 2.0),
    QuickTemplate("Emails", Category.ADMIN.value, 0.5),
    QuickTemplate("Workout", Category.HEALTH.value, 1.0),
    QuickTemplate("Lunch", Category.REST.value, 1.0),
    QuickTemplate("Call a Friend", Category.SOCIAL.value, 0.5),
    QuickTemplate("Reading", Category.LEARNING.value, 1.0),
)


def get_template(label: str) -> QuickTemplate | None:
    """Look up a quick template by label (case-insensitive)."""
    for template in QUICK_TEMPLATES:
        if template.label.lower() == label.lower():
            return template
    return None


def build_candidate(picked_time: float, prefill: TaskCandidate | None = None) -> TaskCandidate:
    """Build a new-task candidate from a timeline pick.

    The start snaps to the nearest quarter-hour. The slot lasts one hour
    unless the prefill carries its own range, in which case that range's
    raw length is kept. The end always lands in [0, 24), so an end
    past midnight wraps (end < start).

    Args:
        picked_time: Hour value where the user clicked
        prefill: Optional template or manual fields

    Returns:
        Candidate with defaults filled in (no id assigned yet)
    """
    start = clock.round_to_quarter(picked_time)

    length = 1.0
    if prefill is not None and prefill.end_time:
        length = prefill.end_time - (prefill.start_time or 0)

    # Keep the end on the clock face; a prefill crossing midnight has a
    # negative raw length
    end = (start + length) % clock.HOURS_PER_DAY

    base = TaskCandidate(
        title="",
        category=DEFAULT_CATEGORY,
        completed=False,
        energy_level=DEFAULT_ENERGY_LEVEL,
    )
    if prefill is not None:
        base = replace(base, **prefill.changes())
    return replace(base, start_time=start, end_time=end)


def quick_add(template: QuickTemplate, now: datetime) -> TaskCandidate:
    """Candidate for a quick template starting at the next quarter-hour."""
    current = clock.ceil_to_quarter(now.hour + now.minute / 60) % clock.HOURS_PER_DAY
    prefill = TaskCandidate(
        title=template.label,
        category=template.category,
        start_time=current,
        end_time=current + template.duration,
    )
    return build_candidate(current, prefill)


def commit_candidate(
    candidate: TaskCandidate,
    existing_tasks: Iterable[Task],
    id_factory: IdFactory = new_task_id,
) -> Task:
    """Turn a validated candidate into a Task value.

    A candidate whose id names a stored task is an edit: its set fields
    are merged over the stored task and the id is kept. Anything else is
    a new task and gets a fresh id.

    Raises:
        ValueError: If a new task lacks a title or a time bound
    """
    if candidate.id is not None:
        for task in existing_tasks:
            if task.id == candidate.id:
                changes = candidate.changes()
                changes.pop("id")
                return replace(task, **changes)

    missing = [
        name
        for name in ("title", "start_time", "end_time")
        if getattr(candidate, name) is None
    ]
    if missing:
        raise ValueError(f"Candidate is missing {', '.join(missing)}")

    return Task(
        id=id_factory(),
        title=candidate.title,  # type: ignore[arg-type]
        category=candidate.category or DEFAULT_CATEGORY,
        start_time=candidate.start_time,  # type: ignore[arg-type]
        end_time=candidate.end_time,  # type: ignore[arg-type]
        completed=False,
        energy_level=candidate.energy_level or DEFAULT_ENERGY_LEVEL,
        notes=candidate.notes,
    )
