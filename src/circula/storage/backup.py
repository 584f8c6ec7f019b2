"""Backup export and import of the schedule."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from circula.errors import BackupError, RecordError
from circula.schedule.models import Task
from circula.storage.mapping import record_to_task, task_to_record
from circula.storage.repository import TaskRepository

logger = logging.getLogger(__name__)


def export_backup(repository: TaskRepository, now: datetime | None = None) -> dict[str, Any]:
    """Snapshot every task into a backup document."""
    now = now or datetime.now(timezone.utc)
    tasks = sorted(repository.list_tasks(), key=lambda t: t.start_time)
    return {
        "tasks": [task_to_record(task) for task in tasks],
        "export_date": now.isoformat(),
    }


def backup_filename(now: datetime | None = None) -> str:
    """Suggested filename for a backup download."""
    now = now or datetime.now(timezone.utc)
    return f"circula-backup-{now.date().isoformat()}.json"


def parse_backup(payload: str | bytes | dict[str, Any]) -> list[Task]:
    """Read tasks out of a backup document.

    Malformed task records are skipped with a warning. When an id repeats,
    the later record wins.

    Raises:
        BackupError: If the document is not JSON or has no task list
    """
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise BackupError(f"Backup is not valid JSON: {e}") from e
    else:
        data = payload

    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise BackupError("Backup has no task list")

    tasks: dict[str, Task] = {}
    for row in data["tasks"]:
        try:
            task = record_to_task(row)
        except RecordError as e:
            logger.warning(f"[Backup] Skipping invalid task: {e}")
            continue
        if task.id in tasks:
            logger.warning(f"[Backup] Duplicate task id {task.id}, keeping the later record")
        tasks[task.id] = task
    return list(tasks.values())


def import_backup(repository: TaskRepository, payload: str | bytes | dict[str, Any]) -> list[Task]:
    """Replace the stored schedule with the tasks from a backup."""
    tasks = parse_backup(payload)
    saved = repository.replace_all(tasks)
    logger.info(f"[Backup] Imported {len(saved)} tasks")
    return saved
