"""Ingest bulk-generated plans (e.g. from an AI planner)."""

from dataclasses import dataclass, field
from typing import Any

from circula.errors import PlanRejectedError
from circula.schedule import clock
from circula.schedule.assembler import IdFactory, new_task_id
from circula.schedule.models import DEFAULT_ENERGY_LEVEL, Diagnostic, Task, TaskCandidate
from circula.schedule.validator import validate_task


@dataclass
class PlanImport:
    """Tasks kept from a plan, plus what was dropped."""

    accepted: list[Task] = field(default_factory=list)
    warnings: dict[str, list[Diagnostic]] = field(default_factory=dict)
    rejected: int = 0


def _read_time(item: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        if key in item and item[key] is not None:
            try:
                return float(item[key])
            except (TypeError, ValueError):
                return None
    return None


def _to_task(item: Any, id_factory: IdFactory) -> Task | None:
    if not isinstance(item, dict) or not item.get("title") or not item.get("category"):
        return None

    start = _read_time(item, "start_time", "startTime")
    end = _read_time(item, "end_time", "endTime")
    if start is None or end is None:
        return None
    if not (clock.is_valid_time(start) and clock.is_valid_time(end)):
        return None

    notes = str(item.get("notes") or "").strip()
    return Task(
        id=id_factory(),
        title=str(item["title"]).strip(),
        category=str(item["category"]),
        start_time=start,
        end_time=end,
        completed=False,
        energy_level=DEFAULT_ENERGY_LEVEL,
        notes=notes or None,
    )


def ingest_plan(raw_items: list[Any], id_factory: IdFactory = new_task_id) -> PlanImport:
    """Convert raw planner output into validated tasks.

    Items that are not objects, lack a title or category, or carry
    unreadable times are dropped, as are tasks that fail validation. The
    survivors are then checked against each other and their warnings are
    kept per task.

    Raises:
        PlanRejectedError: If no task survives
    """
    result = PlanImport()
    tasks: list[Task] = []
    for item in raw_items:
        task = _to_task(item, id_factory)
        if task is None:
            result.rejected += 1
        else:
            tasks.append(task)

    # Errors never depend on the other tasks; overlaps are only reported
    # against tasks that survive.
    for task in tasks:
        if validate_task(TaskCandidate.from_task(task), []).is_valid:
            result.accepted.append(task)
        else:
            result.rejected += 1

    for task in result.accepted:
        verdict = validate_task(
            TaskCandidate.from_task(task), result.accepted, exclude_id=task.id
        )
        if verdict.warnings:
            result.warnings[task.id] = verdict.warnings

    if not result.accepted:
        raise PlanRejectedError("Generated tasks were invalid. Please try again.")
    return result
