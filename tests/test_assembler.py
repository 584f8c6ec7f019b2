"""Tests for the candidate assembler."""

from datetime import datetime

import pytest
from conftest import make_task

from circula.schedule.assembler import (
    QUICK_TEMPLATES,
    build_candidate,
    commit_candidate,
    get_template,
    quick_add,
)
from circula.schedule.models import TaskCandidate


def test_build_candidate_defaults() -> None:
    """Test a bare timeline pick."""
    candidate = build_candidate(9.1)

    assert candidate.id is None
    assert candidate.title == ""
    assert candidate.category == "Focus"
    assert candidate.start_time == 9.0
    assert candidate.end_time == 10.0
    assert candidate.completed is False
    assert candidate.energy_level == 2


def test_build_candidate_rounds_pick_with_prefill() -> None:
    """Test a pick at 22.07 with a 22:00-23:54 prefill."""
    candidate = build_candidate(22.07, TaskCandidate(start_time=22.0, end_time=23.9))

    assert candidate.start_time == 22.0
    assert candidate.end_time == pytest.approx(23.9)


def test_build_candidate_wraps_past_midnight() -> None:
    """Test that an end at or past 24 wraps into the next day."""
    candidate = build_candidate(23.5)

    assert candidate.start_time == 23.5
    assert candidate.end_time == 0.5

    assert build_candidate(23.0).end_time == 0.0


def test_build_candidate_prefill_across_midnight() -> None:
    """Test that a prefill ending after midnight still yields an end on the clock."""
    candidate = build_candidate(10.0, TaskCandidate(start_time=23.0, end_time=1.0))

    assert candidate.start_time == 10.0
    assert candidate.end_time == 12.0


def test_build_candidate_keeps_prefill_fields() -> None:
    """Test that template fields override the defaults."""
    prefill = TaskCandidate(
        title="Workout", category="Health", start_time=7.0, end_time=8.5, energy_level=3
    )

    candidate = build_candidate(18.2, prefill)

    assert candidate.title == "Workout"
    assert candidate.category == "Health"
    assert candidate.energy_level == 3
    assert candidate.start_time == 18.25
    assert candidate.end_time == 19.75


def test_build_candidate_prefill_without_range_uses_one_hour() -> None:
    """Test that a prefill without an end keeps the one-hour default."""
    candidate = build_candidate(14.0, TaskCandidate(title="Call"))

    assert candidate.title == "Call"
    assert candidate.end_time == 15.0


def test_commit_new_candidate_assigns_id() -> None:
    """Test that committing a new candidate assigns a fresh id."""
    candidate = build_candidate(9.0, TaskCandidate(title="Write"))

    task = commit_candidate(candidate, [], id_factory=lambda: "new-id")

    assert task.id == "new-id"
    assert task.title == "Write"
    assert task.category == "Focus"
    assert task.completed is False
    assert task.energy_level == 2


def test_commit_new_candidate_uses_uuid_by_default() -> None:
    """Test that default ids are unique."""
    candidate = TaskCandidate(title="Write", start_time=9.0, end_time=10.0)

    first = commit_candidate(candidate, [])
    second = commit_candidate(candidate, [])

    assert first.id != second.id
    assert len(first.id) == 36


def test_commit_new_candidate_resets_completed() -> None:
    """Test that a new task never starts out completed."""
    candidate = TaskCandidate(title="Write", start_time=9.0, end_time=10.0, completed=True)

    assert commit_candidate(candidate, []).completed is False


def test_commit_edit_merges_changes() -> None:
    """Test that an edit keeps the id and untouched fields."""
    stored = make_task("t1", 9.0, 10.0, title="Old", notes="keep me", energy_level=3)

    task = commit_candidate(TaskCandidate(id="t1", title="New", end_time=10.5), [stored])

    assert task.id == "t1"
    assert task.title == "New"
    assert task.start_time == 9.0
    assert task.end_time == 10.5
    assert task.notes == "keep me"
    assert task.energy_level == 3
    assert stored.title == "Old"


def test_commit_unknown_id_creates_new_task() -> None:
    """Test that an id not in the schedule is treated as new."""
    candidate = TaskCandidate(id="ghost", title="Write", start_time=9.0, end_time=10.0)

    task = commit_candidate(candidate, [], id_factory=lambda: "fresh")

    assert task.id == "fresh"


def test_commit_incomplete_candidate_raises() -> None:
    """Test that a new task needs a title and both bounds."""
    with pytest.raises(ValueError, match="start_time"):
        commit_candidate(TaskCandidate(title="Write", end_time=10.0), [])


def test_quick_add_starts_at_next_quarter() -> None:
    """Test that quick templates start at the next quarter-hour."""
    template = get_template("deep work")
    assert template is not None

    candidate = quick_add(template, datetime(2026, 3, 2, 9, 7))

    assert candidate.title == "Deep Work"
    assert candidate.start_time == 9.25
    assert candidate.end_time == 11.25


def test_quick_add_late_evening_wraps() -> None:
    """Test a quick template picked just before midnight."""
    template = get_template("Lunch")
    assert template is not None

    candidate = quick_add(template, datetime(2026, 3, 2, 23, 50))

    assert candidate.start_time == 0.0
    assert candidate.end_time == 1.0


def test_templates_have_positive_duration() -> None:
    """Test the stock templates."""
    assert QUICK_TEMPLATES
    assert all(t.duration > 0 for t in QUICK_TEMPLATES)
    assert get_template("missing") is None
