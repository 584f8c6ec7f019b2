"""Test fixtures for Circula."""

from pathlib import Path

import pytest

from circula.config import Config
from circula.schedule.models import Task
from circula.storage.local_store import LocalTaskRepository


def make_task(
    task_id: str,
    start: float,
    end: float,
    title: str | None = None,
    category: str = "Focus",
    **kwargs: object,
) -> Task:
    """Build a task with sensible defaults."""
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        category=category,
        start_time=start,
        end_time=end,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create temporary data directory."""
    data_dir = tmp_path / "circula"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def test_config(tmp_data_dir: Path) -> Config:
    """Config pointing at the temporary data directory."""
    return Config(backend="local", data_dir=str(tmp_data_dir))


@pytest.fixture
def local_repository(test_config: Config) -> LocalTaskRepository:
    """Empty local repository."""
    return LocalTaskRepository(test_config.get_tasks_path())


@pytest.fixture
def sample_tasks() -> list[Task]:
    """A small day, deliberately not sorted by start time."""
    return [
        make_task("lunch", 12.0, 13.0, title="Lunch", category="Rest"),
        make_task("deep-work", 9.0, 11.0, title="Deep Work", energy_level=3),
        make_task("sleep", 23.0, 7.0, title="Sleep", category="Rest", energy_level=1),
    ]
