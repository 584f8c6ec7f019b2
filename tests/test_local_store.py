"""Tests for LocalTaskRepository."""

from dataclasses import replace
from pathlib import Path

import pytest
import yaml
from conftest import make_task

from circula.errors import RepositoryError, StorageLimitError
from circula.schedule.models import Task
from circula.storage import local_store
from circula.storage.local_store import LocalTaskRepository


def test_list_tasks_empty(local_repository: LocalTaskRepository) -> None:
    """Test listing tasks before anything was saved."""
    assert local_repository.list_tasks() == []


def test_upsert_and_list(local_repository: LocalTaskRepository, sample_tasks: list[Task]) -> None:
    """Test that saved tasks read back unchanged and in insertion order."""
    for task in sample_tasks:
        local_repository.upsert(task)

    assert local_repository.list_tasks() == sample_tasks


def test_upsert_replaces_by_id(
    local_repository: LocalTaskRepository, sample_tasks: list[Task]
) -> None:
    """Test that upserting an existing id replaces it in place."""
    local_repository.upsert_many(sample_tasks)
    edited = replace(sample_tasks[0], title="Long lunch", end_time=13.5)

    local_repository.upsert(edited)

    tasks = local_repository.list_tasks()
    assert len(tasks) == 3
    assert tasks[0] == edited


def test_delete(local_repository: LocalTaskRepository, sample_tasks: list[Task]) -> None:
    """Test removing a task by id; unknown ids are ignored."""
    local_repository.upsert_many(sample_tasks)

    local_repository.delete("lunch")
    local_repository.delete("unknown")

    assert [t.id for t in local_repository.list_tasks()] == ["deep-work", "sleep"]


def test_replace_all_and_clear(
    local_repository: LocalTaskRepository, sample_tasks: list[Task]
) -> None:
    """Test replacing and clearing the schedule."""
    local_repository.upsert_many(sample_tasks)
    plan = [make_task("p1", 8.0, 9.0)]

    local_repository.replace_all(plan)
    assert local_repository.list_tasks() == plan

    local_repository.clear()
    assert local_repository.list_tasks() == []
    assert not local_repository.path.exists()


def test_file_is_snake_case_yaml(
    local_repository: LocalTaskRepository, sample_tasks: list[Task]
) -> None:
    """Test the on-disk record shape."""
    local_repository.upsert(sample_tasks[0])

    rows = yaml.safe_load(local_repository.path.read_text())

    assert rows == [
        {
            "id": "lunch",
            "title": "Lunch",
            "category": "Rest",
            "start_time": 12.0,
            "end_time": 13.0,
            "notes": None,
            "completed": False,
            "energy_level": 2,
        }
    ]


def test_invalid_records_are_dropped_and_cleaned(local_repository: LocalTaskRepository) -> None:
    """Test that malformed records are filtered and the file rewritten."""
    path = local_repository.path
    path.write_text(
        yaml.safe_dump(
            [
                {"id": "ok", "title": "Fine", "category": "Focus", "start_time": 9, "end_time": 10},
                {"id": "no-title", "category": "Focus", "start_time": 9, "end_time": 10},
                {"id": "bad-time", "title": "X", "category": "Focus", "start_time": "soon"},
                "not a record",
            ]
        )
    )

    tasks = local_repository.list_tasks()

    assert [t.id for t in tasks] == ["ok"]
    assert len(yaml.safe_load(path.read_text())) == 1


def test_out_of_range_records_are_dropped(local_repository: LocalTaskRepository) -> None:
    """Test that stored times and energy levels are range-checked on load."""
    local_repository.path.write_text(
        yaml.safe_dump(
            [
                {"id": "ok", "title": "Fine", "category": "Focus", "start_time": 9, "end_time": 10},
                {"id": "late", "title": "X", "category": "Focus", "start_time": 9, "end_time": 24},
                {
                    "id": "loud",
                    "title": "Y",
                    "category": "Focus",
                    "start_time": 11,
                    "end_time": 12,
                    "energy_level": 0,
                },
            ]
        )
    )

    assert [t.id for t in local_repository.list_tasks()] == ["ok"]


def test_replace_all_collapses_duplicate_ids(local_repository: LocalTaskRepository) -> None:
    """Test that replacing with a repeated id keeps one task, the later one."""
    local_repository.replace_all(
        [make_task("dup", 8.0, 9.0), make_task("other", 12.0, 13.0), make_task("dup", 10.0, 11.0)]
    )

    tasks = local_repository.list_tasks()
    assert [t.id for t in tasks] == ["dup", "other"]
    assert tasks[0].start_time == 10.0


def test_camel_case_records_are_accepted(local_repository: LocalTaskRepository) -> None:
    """Test reading records written with camelCase keys."""
    local_repository.path.write_text(
        yaml.safe_dump(
            [
                {
                    "id": "legacy",
                    "title": "Legacy",
                    "category": "Admin",
                    "startTime": 22.5,
                    "endTime": 0.5,
                    "energyLevel": 1,
                }
            ]
        )
    )

    task = local_repository.list_tasks()[0]

    assert task.start_time == 22.5
    assert task.end_time == 0.5
    assert task.energy_level == 1


def test_non_list_file_raises(local_repository: LocalTaskRepository) -> None:
    """Test that a corrupted file is reported, not silently reset."""
    local_repository.path.write_text("tasks: nope\n")

    with pytest.raises(RepositoryError):
        local_repository.list_tasks()


def test_unparseable_file_raises(local_repository: LocalTaskRepository) -> None:
    """Test that invalid YAML is reported."""
    local_repository.path.write_text("- [unclosed\n")

    with pytest.raises(RepositoryError):
        local_repository.list_tasks()


def test_storage_limit(
    local_repository: LocalTaskRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that oversized data is refused."""
    monkeypatch.setattr(local_store, "MAX_STORAGE_BYTES", 100)

    with pytest.raises(StorageLimitError):
        local_repository.upsert(make_task("big", 9.0, 10.0, notes="n" * 200))

    assert not local_repository.path.exists()


def test_creates_parent_directory(tmp_path: Path) -> None:
    """Test that the data directory is created on first write."""
    repo = LocalTaskRepository(tmp_path / "nested" / "dir" / "tasks.yaml")

    repo.upsert(make_task("a", 9.0, 10.0))

    assert repo.path.exists()
