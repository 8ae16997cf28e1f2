"""HTTP surface for tasks."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from weekboard.core.config import constants
from weekboard.core.errors import InputValidationError
from weekboard.domain.create_models import TaskCreate
from weekboard.domain.task import Task
from weekboard.domain.update_models import CopyRequest, ReorderRequest, TaskUpdate
from weekboard.interface.auth import Principal, require_principal
from weekboard.models.service_models import BatchResult
from weekboard.services import task_service
from weekboard.services.week_calendar import parse_week_key


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(require_principal)])


def _owner(owner: str | None, email: str | None) -> str | None:
    # `email` is the parameter name older clients send
    return owner or email or None


@router.get("", response_model=list[Task])
async def get_tasks(
    owner: str | None = Query(default=None, description="Only tasks created by this member"),
    email: str | None = Query(default=None, description="Alias of owner"),
    week: str | None = Query(default=None, description="Week key; applies weekly propagation when given"),
) -> list[Task]:
    """List tasks, or load one week's tasks when `week` is given."""
    member = _owner(owner, email)
    if week:
        return await task_service.load_week(week, member)
    return await task_service.list_tasks(owner=member)


@router.post("", response_model=Task)
async def post_task(payload: TaskCreate, principal: Principal = Depends(require_principal)) -> Task:
    """Create a task. The server assigns id and createdAt."""
    if not payload.member_id:
        payload = payload.model_copy(update={"member_id": principal.email})
    return await task_service.create_task(payload)


@router.patch("")
async def patch_task(payload: TaskUpdate) -> dict[str, Any]:
    """Toggle completion or edit fields of one task."""
    if not payload.id:
        raise InputValidationError("Missing ID")

    fields = payload.changed_fields()
    if not fields:
        raise InputValidationError("Invalid data")

    if set(fields) == {"is_done"}:
        await task_service.set_done(payload.id, bool(fields["is_done"]))
    else:
        await task_service.edit_task(payload.id, fields)
    return {"success": True}


@router.delete("")
async def delete_task(task_id: str | None = Query(default=None, alias="id")) -> dict[str, Any]:
    """Delete one task. Deleting an unknown ID succeeds."""
    if not task_id:
        raise InputValidationError("Missing ID")
    await task_service.delete_task(task_id)
    return {"success": True}


@router.post("/reorder")
async def post_reorder(payload: ReorderRequest) -> JSONResponse:
    """Persist manual order values, each independently."""
    result = await task_service.apply_order_updates(payload.updates)
    if result.ok:
        return JSONResponse(content={"success": True, "failed": []})

    return JSONResponse(
        status_code=constants.HTTP_SERVER_ERROR,
        content={"error": f"Failed to reorder {len(result.failed)} task(s)", "failed": result.failed},
    )


@router.post("/clear-completed", response_model=BatchResult)
async def post_clear_completed(
    week: str = Query(..., description="Week key"),
    owner: str | None = Query(default=None),
) -> BatchResult:
    """Delete the completed tasks of a week, best effort."""
    parse_week_key(week)
    week_tasks = task_service.tasks_in_week(await task_service.list_tasks(owner=owner), week)
    return await task_service.clear_completed(week_tasks)


@router.post("/copy-to-next-week")
async def post_copy_to_next_week(payload: CopyRequest) -> JSONResponse:
    """Copy one task, or all pending tasks of a week, into the following week."""
    if payload.id:
        task = next((t for t in await task_service.list_tasks() if t.id == payload.id), None)
        if task is None:
            return JSONResponse(status_code=constants.HTTP_NOT_FOUND, content={"error": "Task not found"})
        copy = await task_service.copy_to_next_week(task)
        return JSONResponse(content=copy.model_dump(mode="json", by_alias=True))

    if not payload.week:
        raise InputValidationError("Either id or week is required")

    parse_week_key(payload.week)
    week_tasks = task_service.tasks_in_week(await task_service.list_tasks(owner=payload.owner), payload.week)
    result = await task_service.copy_all_pending_to_next_week(week_tasks)
    return JSONResponse(content=result.model_dump(mode="json"))
