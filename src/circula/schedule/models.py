"""Domain models for the daily schedule."""

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any, Literal


class Category(str, Enum):
    """Known task categories (display metadata lives in the UI)."""

    FOCUS = "Focus"
    REST = "Rest"
    SOCIAL = "Social"
    ADMIN = "Admin"
    HEALTH = "Health"
    LEARNING = "Learning"


class EnergyLevel(IntEnum):
    """How demanding a task is."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


DEFAULT_CATEGORY = Category.FOCUS.value
DEFAULT_ENERGY_LEVEL = int(EnergyLevel.MEDIUM)


@dataclass(frozen=True)
class Task:
    """A time-boxed slot on the 24-hour clock.

    end_time < start_time means the task runs past midnight.
    """

    id: str
    title: str
    category: str
    start_time: float  # Fractional hours in [0, 24)
    end_time: float  # Fractional hours in [0, 24), may be < start_time
    completed: bool = False
    energy_level: int = DEFAULT_ENERGY_LEVEL
    notes: str | None = None


@dataclass(frozen=True)
class TaskCandidate:
    """A possibly partial task, as typed into an editing form."""

    id: str | None = None
    title: str | None = None
    category: str | None = None
    start_time: float | None = None
    end_time: float | None = None
    completed: bool | None = None
    energy_level: int | None = None
    notes: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskCandidate":
        """Lift a complete task into candidate form."""
        return cls(**{f.name: getattr(task, f.name) for f in fields(Task)})

    def changes(self) -> dict[str, Any]:
        """Fields that carry a value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class Diagnostic:
    """A single field-scoped error or warning."""

    field: str
    message: str
    severity: Severity


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a task or a whole schedule."""

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
