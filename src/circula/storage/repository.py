"""Task repository protocol."""

from typing import Protocol

from circula.schedule.models import Task


class TaskRepository(Protocol):
    """Protocol for storing the schedule. Tasks are unique by id."""

    def list_tasks(self) -> list[Task]:
        """List all stored tasks (no ordering guaranteed)."""
        ...

    def upsert(self, task: Task) -> Task:
        """Insert a task or replace the one with the same id."""
        ...

    def upsert_many(self, tasks: list[Task]) -> list[Task]:
        """Insert or replace several tasks at once."""
        ...

    def delete(self, task_id: str) -> None:
        """Remove a task by id. Unknown ids are ignored."""
        ...

    def replace_all(self, tasks: list[Task]) -> list[Task]:
        """Replace the whole schedule."""
        ...

    def clear(self) -> None:
        """Remove every task."""
        ...


def merge_by_id(current: list[Task], incoming: list[Task]) -> list[Task]:
    """Replace tasks with matching ids in place, append the rest."""
    updates = {task.id: task for task in incoming}
    merged = [updates.pop(task.id, task) for task in current]
    merged.extend(updates.values())
    return merged
