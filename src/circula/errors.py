"""Exceptions raised by Circula."""


class CirculaError(Exception):
    """Base class for Circula errors."""


class RepositoryError(CirculaError):
    """A storage backend failed to read or write tasks."""


class RecordError(RepositoryError):
    """A stored record does not match the task schema."""


class StorageLimitError(RepositoryError):
    """Serialized tasks exceed the local storage limit."""


class TaskNotFoundError(CirculaError):
    """No task with the given id exists."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PlanRejectedError(CirculaError):
    """A generated plan contained no usable tasks."""


class BackupError(CirculaError):
    """A backup document could not be read."""
