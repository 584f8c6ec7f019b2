"""API models for Circula."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from circula.schedule.assembler import QuickTemplate
from circula.schedule.auditor import ScheduleSummary
from circula.schedule.models import Category, Task, TaskCandidate, ValidationResult


class CandidateModel(BaseModel):
    """Possibly partial task as sent by an editing form.

    Category membership and the [0, 24) time range are checked here;
    everything else is left to the validator so it can report diagnostics.
    """

    model_config = ConfigDict(use_enum_values=True)

    id: str | None = None
    title: str | None = None
    category: Category | None = None
    start_time: float | None = Field(default=None, ge=0, lt=24)
    end_time: float | None = Field(default=None, ge=0, lt=24)
    completed: bool | None = None
    energy_level: int | None = None
    notes: str | None = None

    def to_candidate(self) -> TaskCandidate:
        return TaskCandidate(**self.model_dump())


class CandidateResponse(BaseModel):
    """API response model for an assembled candidate."""

    id: str | None
    title: str | None
    category: str | None
    start_time: float | None
    end_time: float | None
    completed: bool | None
    energy_level: int | None
    notes: str | None

    @classmethod
    def from_candidate(cls, candidate: TaskCandidate) -> "CandidateResponse":
        return cls(**vars(candidate))


class TaskResponse(BaseModel):
    """API response model for tasks."""

    id: str
    title: str
    category: str
    start_time: float
    end_time: float
    completed: bool
    energy_level: int
    notes: str | None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            category=task.category,
            start_time=task.start_time,
            end_time=task.end_time,
            completed=task.completed,
            energy_level=task.energy_level,
            notes=task.notes,
        )


class DiagnosticModel(BaseModel):
    """A single error or warning."""

    field: str
    message: str
    severity: str


class ValidationResultResponse(BaseModel):
    """API response model for a validation verdict."""

    is_valid: bool
    errors: list[DiagnosticModel]
    warnings: list[DiagnosticModel]

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultResponse":
        return cls(
            is_valid=result.is_valid,
            errors=[DiagnosticModel(**vars(d)) for d in result.errors],
            warnings=[DiagnosticModel(**vars(d)) for d in result.warnings],
        )


class CandidateRequest(BaseModel):
    """Request model for building a candidate from a timeline pick."""

    picked_time: float = Field(ge=0, lt=24)
    prefill: CandidateModel | None = None


class ValidateRequest(BaseModel):
    """Request model for live validation."""

    candidate: CandidateModel
    exclude_id: str | None = None


class SaveTaskResponse(BaseModel):
    """API response model for a saved task."""

    task: TaskResponse
    warnings: list[DiagnosticModel]


class PlanRequest(BaseModel):
    """Request model for importing a generated plan."""

    items: list[Any]


class PlanResponse(BaseModel):
    """API response model for an imported plan."""

    tasks: list[TaskResponse]
    warnings: dict[str, list[DiagnosticModel]]
    rejected: int


class SummaryResponse(BaseModel):
    """API response model for the day summary."""

    task_count: int
    completed_count: int
    total_hours: float
    hours_by_category: dict[str, float]
    average_energy: float | None

    @classmethod
    def from_summary(cls, summary: ScheduleSummary) -> "SummaryResponse":
        return cls(**vars(summary))


class TemplateResponse(BaseModel):
    """API response model for quick templates."""

    label: str
    category: str
    duration: float

    @classmethod
    def from_template(cls, template: QuickTemplate) -> "TemplateResponse":
        return cls(**vars(template))


class ImportResponse(BaseModel):
    """API response model for a backup import."""

    imported: int
