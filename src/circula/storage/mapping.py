"""Mapping between stored task records and domain tasks.

Rows are snake_case (``start_time``). Older exports and planner output
use camelCase (``startTime``); both spellings are accepted on input,
output is always snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from circula.errors import RecordError
from circula.schedule.models import DEFAULT_ENERGY_LEVEL, Task


class TaskRecord(BaseModel):
    """Stored shape of a task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    user_id: str | None = None
    title: str = Field(min_length=1)
    category: str
    start_time: float = Field(ge=0, lt=24)
    end_time: float = Field(ge=0, lt=24)
    notes: str | None = None
    completed: bool = False
    energy_level: int = Field(default=DEFAULT_ENERGY_LEVEL, ge=1, le=3)


def record_to_task(row: Any) -> Task:
    """Parse a raw row into a Task.

    Raises:
        RecordError: If the row does not match the record schema
    """
    try:
        record = TaskRecord.model_validate(row)
    except ValidationError as e:
        raise RecordError(f"Invalid task record: {e.error_count()} error(s)") from e
    return Task(
        id=record.id,
        title=record.title,
        category=record.category,
        start_time=record.start_time,
        end_time=record.end_time,
        completed=record.completed,
        energy_level=record.energy_level,
        notes=record.notes,
    )


def task_to_record(task: Task, user_id: str | None = None) -> dict[str, Any]:
    """Serialize a Task into a snake_case row.

    Raises:
        RecordError: If the task does not fit the record schema
    """
    try:
        record = TaskRecord(
            id=task.id,
            user_id=user_id,
            title=task.title,
            category=task.category,
            start_time=task.start_time,
            end_time=task.end_time,
            notes=task.notes,
            completed=task.completed,
            energy_level=task.energy_level,
        )
    except ValidationError as e:
        raise RecordError(f"Task {task.id} cannot be stored: {e.error_count()} error(s)") from e
    # Local rows carry no owner
    exclude = {"user_id"} if user_id is None else None
    return record.model_dump(exclude=exclude)
