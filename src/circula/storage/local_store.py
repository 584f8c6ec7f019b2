"""On-device task storage in a YAML file."""

import logging
import threading
from pathlib import Path
from typing import Any

import yaml

from circula.errors import RecordError, RepositoryError, StorageLimitError
from circula.schedule.models import Task
from circula.storage.mapping import record_to_task, task_to_record
from circula.storage.repository import merge_by_id

logger = logging.getLogger(__name__)

MAX_STORAGE_BYTES = 4 * 1024 * 1024


class LocalTaskRepository:
    """Task repository backed by a single YAML file."""

    def __init__(self, tasks_path: Path) -> None:
        """Initialize with the path of the tasks file (created on first write)."""
        self._path = tasks_path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def list_tasks(self) -> list[Task]:
        """List all tasks, dropping malformed records.

        Malformed records are logged and the cleaned list is written back.

        Raises:
            RepositoryError: If the file is unreadable or not a list
        """
        with self._lock:
            return self._load()

    def upsert(self, task: Task) -> Task:
        with self._lock:
            self._save(merge_by_id(self._load(), [task]))
        return task

    def upsert_many(self, tasks: list[Task]) -> list[Task]:
        with self._lock:
            self._save(merge_by_id(self._load(), tasks))
        return tasks

    def delete(self, task_id: str) -> None:
        with self._lock:
            tasks = self._load()
            remaining = [t for t in tasks if t.id != task_id]
            if len(remaining) != len(tasks):
                self._save(remaining)

    def replace_all(self, tasks: list[Task]) -> list[Task]:
        # Later duplicates win
        tasks = merge_by_id([], tasks)
        with self._lock:
            self._save(tasks)
        return tasks

    def clear(self) -> None:
        with self._lock:
            if self._path.exists():
                self._path.unlink()
                logger.info(f"[LocalStore] Cleared {self._path}")

    def _load(self) -> list[Task]:
        if not self._path.exists():
            return []

        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise RepositoryError(f"Failed to read {self._path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise RepositoryError(f"Stored tasks in {self._path} are not a list")

        tasks: list[Task] = []
        for row in data:
            try:
                tasks.append(record_to_task(row))
            except RecordError as e:
                logger.debug(f"[LocalStore] Skipping record: {e}")

        dropped = len(data) - len(tasks)
        if dropped:
            logger.warning(f"[LocalStore] Filtered out {dropped} invalid tasks")
            self._save(tasks)
        return tasks

    def _save(self, tasks: list[Task]) -> None:
        rows: list[dict[str, Any]] = [task_to_record(task) for task in tasks]
        text = yaml.safe_dump(rows, default_flow_style=False, sort_keys=False)

        size = len(text.encode("utf-8"))
        if size > MAX_STORAGE_BYTES:
            raise StorageLimitError(f"Task data exceeds storage limit ({size} bytes)")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as e:
            raise RepositoryError(f"Failed to write {self._path}: {e}") from e
        logger.debug(f"[LocalStore] Saved {len(tasks)} tasks to {self._path}")
