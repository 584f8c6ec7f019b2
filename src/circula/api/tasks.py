"""Task API endpoints."""

# FastAPI Depends pattern is safe in function signatures

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from circula.api.models import (
    CandidateModel,
    CandidateRequest,
    CandidateResponse,
    DiagnosticModel,
    ImportResponse,
    PlanRequest,
    PlanResponse,
    SaveTaskResponse,
    SummaryResponse,
    TaskResponse,
    TemplateResponse,
    ValidateRequest,
    ValidationResultResponse,
)
from circula.errors import BackupError, PlanRejectedError, RepositoryError
from circula.factory import get_repository
from circula.schedule.assembler import (
    QUICK_TEMPLATES,
    build_candidate,
    commit_candidate,
    get_template,
    quick_add,
)
from circula.schedule.auditor import audit_schedule, summarize_schedule
from circula.schedule.clock import format_time
from circula.schedule.models import Task, TaskCandidate, ValidationResult
from circula.schedule.plan_import import ingest_plan
from circula.schedule.validator import validate_task
from circula.storage import backup
from circula.storage.repository import TaskRepository

logger = logging.getLogger(__name__)

router = APIRouter()

Repository = Annotated[TaskRepository, Depends(get_repository)]


async def _load_tasks(repository: TaskRepository) -> list[Task]:
    """Read the schedule, mapping storage failures to 503."""
    try:
        return await asyncio.to_thread(repository.list_tasks)
    except RepositoryError as e:
        logger.error(f"Failed to load tasks: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e


def _find_task(tasks: list[Task], task_id: str) -> Task:
    for task in tasks:
        if task.id == task_id:
            return task
    raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")


def _rejected(result: ValidationResult) -> HTTPException:
    body = ValidationResultResponse.from_result(result)
    return HTTPException(
        status_code=422,
        detail={"message": "Task is invalid", **body.model_dump()},
    )


async def _save(repository: TaskRepository, task: Task) -> Task:
    try:
        return await asyncio.to_thread(repository.upsert, task)
    except RepositoryError as e:
        logger.error(f"Failed to save task {task.id}: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.get("/tasks", response_model=list[TaskResponse])
async def list_tasks(repository: Repository) -> list[TaskResponse]:
    """List the schedule ordered by start time."""
    tasks = await _load_tasks(repository)
    return [TaskResponse.from_task(t) for t in sorted(tasks, key=lambda t: t.start_time)]


@router.post("/tasks/candidate", response_model=CandidateResponse)
async def create_candidate(request: CandidateRequest) -> CandidateResponse:
    """Build a new-task candidate from a timeline pick.

    Args:
        request: Picked hour and optional prefill

    Returns:
        Candidate snapped to the quarter-hour with defaults filled in
    """
    prefill = request.prefill.to_candidate() if request.prefill else None
    return CandidateResponse.from_candidate(build_candidate(request.picked_time, prefill))


@router.post("/tasks/validate", response_model=ValidationResultResponse)
async def validate(request: ValidateRequest, repository: Repository) -> ValidationResultResponse:
    """Validate a candidate against the current schedule without saving."""
    tasks = await _load_tasks(repository)
    result = validate_task(request.candidate.to_candidate(), tasks, request.exclude_id)
    return ValidationResultResponse.from_result(result)


@router.post("/tasks", response_model=SaveTaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(body: CandidateModel, repository: Repository) -> SaveTaskResponse:
    """Validate and store a new task.

    Returns:
        Stored task plus any advisory warnings

    Raises:
        HTTPException: 422 with diagnostics if the task has errors
    """
    tasks = await _load_tasks(repository)
    candidate = replace(body.to_candidate(), id=None)

    result = validate_task(candidate, tasks)
    if not result.is_valid:
        raise _rejected(result)

    task = await _save(repository, commit_candidate(candidate, tasks))
    logger.info(
        f"Created task {task.id} ({task.title}) "
        f"{format_time(task.start_time)}-{format_time(task.end_time)}"
    )
    return SaveTaskResponse(
        task=TaskResponse.from_task(task),
        warnings=ValidationResultResponse.from_result(result).warnings,
    )


@router.put("/tasks/{task_id}", response_model=SaveTaskResponse)
async def update_task(
    task_id: str, body: CandidateModel, repository: Repository
) -> SaveTaskResponse:
    """Merge changed fields over a stored task and re-validate it.

    Raises:
        HTTPException: 404 if the task is unknown, 422 if the result is invalid
    """
    tasks = await _load_tasks(repository)
    _find_task(tasks, task_id)

    merged = commit_candidate(replace(body.to_candidate(), id=task_id), tasks)
    result = validate_task(TaskCandidate.from_task(merged), tasks, exclude_id=task_id)
    if not result.is_valid:
        raise _rejected(result)

    task = await _save(repository, merged)
    return SaveTaskResponse(
        task=TaskResponse.from_task(task),
        warnings=ValidationResultResponse.from_result(result).warnings,
    )


@router.post("/tasks/{task_id}/complete", response_model=TaskResponse)
async def complete_task(task_id: str, repository: Repository) -> TaskResponse:
    """Mark a task as done."""
    tasks = await _load_tasks(repository)
    task = replace(_find_task(tasks, task_id), completed=True)
    return TaskResponse.from_task(await _save(repository, task))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, repository: Repository) -> Response:
    """Remove a task by id."""
    tasks = await _load_tasks(repository)
    _find_task(tasks, task_id)
    try:
        await asyncio.to_thread(repository.delete, task_id)
    except RepositoryError as e:
        logger.error(f"Failed to delete task {task_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/tasks", status_code=status.HTTP_204_NO_CONTENT)
async def clear_tasks(repository: Repository) -> Response:
    """Remove every task."""
    try:
        await asyncio.to_thread(repository.clear)
    except RepositoryError as e:
        logger.error(f"Failed to clear tasks: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    logger.info("Cleared all tasks")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/schedule/audit", response_model=ValidationResultResponse)
async def audit(repository: Repository) -> ValidationResultResponse:
    """Day-level health warnings for the whole schedule."""
    tasks = await _load_tasks(repository)
    return ValidationResultResponse.from_result(audit_schedule(tasks))


@router.get("/schedule/summary", response_model=SummaryResponse)
async def summary(repository: Repository) -> SummaryResponse:
    """Totals for the analytics view."""
    tasks = await _load_tasks(repository)
    return SummaryResponse.from_summary(summarize_schedule(tasks))


@router.post("/schedule/plan", response_model=PlanResponse)
async def import_plan(request: PlanRequest, repository: Repository) -> PlanResponse:
    """Replace the schedule with a generated plan.

    Each item passes through the task validator; items with errors are
    dropped and counted.

    Raises:
        HTTPException: 422 if no item is usable
    """
    try:
        plan = ingest_plan(request.items)
    except PlanRejectedError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        saved = await asyncio.to_thread(repository.replace_all, plan.accepted)
    except RepositoryError as e:
        logger.error(f"Failed to save plan: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e

    logger.info(f"Imported plan: {len(saved)} tasks, {plan.rejected} rejected")
    return PlanResponse(
        tasks=[TaskResponse.from_task(t) for t in saved],
        warnings={
            task_id: [DiagnosticModel(**vars(d)) for d in diagnostics]
            for task_id, diagnostics in plan.warnings.items()
        },
        rejected=plan.rejected,
    )


@router.get("/backup")
async def export_backup(repository: Repository) -> JSONResponse:
    """Download every task as a JSON backup."""
    try:
        document = await asyncio.to_thread(backup.export_backup, repository)
    except RepositoryError as e:
        logger.error(f"Failed to export backup: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{backup.backup_filename()}"'},
    )


@router.post("/backup", response_model=ImportResponse)
async def import_backup(
    document: Annotated[dict[str, Any], Body()], repository: Repository
) -> ImportResponse:
    """Replace the schedule with the tasks from a backup document."""
    try:
        saved = await asyncio.to_thread(backup.import_backup, repository, document)
    except BackupError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except RepositoryError as e:
        logger.error(f"Failed to import backup: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return ImportResponse(imported=len(saved))


@router.get("/templates", response_model=list[TemplateResponse])
async def list_templates() -> list[TemplateResponse]:
    """List quick-add templates."""
    return [TemplateResponse.from_template(t) for t in QUICK_TEMPLATES]


@router.post("/templates/{label}", response_model=CandidateResponse)
async def use_template(label: str) -> CandidateResponse:
    """Candidate for a quick template starting at the next quarter-hour."""
    template = get_template(label)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Unknown template: {label}")
    return CandidateResponse.from_candidate(quick_add(template, datetime.now()))
