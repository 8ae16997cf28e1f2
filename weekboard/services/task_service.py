"""Task service: weekly task sets, repeat-task propagation and task mutations.

Key Concepts:
- Week load: the tasks whose work_week equals a week key. Loading the real
  current week also propagates repeating tasks from the previous real week.
- Propagation: each repeat_weekly task of the previous real week is cloned
  into the current week unless the current week already holds a task with the
  same content and category. Because the check runs on every load, the
  propagation is idempotent without a scheduler.
- Batches (clear completed, copy pending, reorder) treat every task
  independently; one failure never stops or undoes the others.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from weekboard.core import record_store
from weekboard.core.config import constants
from weekboard.core.errors import InputValidationError, StoreReadError, StoreWriteError
from weekboard.core.logging import log_with_week_context, span
from weekboard.domain.create_models import TaskCreate
from weekboard.domain.task import Task
from weekboard.domain.update_models import OrderUpdate, TaskUpdate
from weekboard.models.service_models import BatchResult
from weekboard.services.week_calendar import WeekContext, next_week, parse_week_key


logger = logging.getLogger(__name__)

UPDATABLE_TASK_FIELDS = frozenset(TaskUpdate.model_fields) - {"id"}


async def list_tasks(*, owner: str | None = None) -> list[Task]:
    """All tasks, optionally by creator. Read failures degrade to an empty list."""
    try:
        return await record_store.list_tasks(owner=owner)
    except StoreReadError as e:
        logger.warning("Task list unavailable, returning empty set: %s", e)
        return []


def tasks_in_week(tasks: Iterable[Task], week_key: str) -> list[Task]:
    """Tasks belonging to exactly this week."""
    return [task for task in tasks if task.work_week == week_key]


def _is_already_propagated(candidate: Task, week_tasks: list[Task]) -> bool:
    # Identity is (content, category), not a lineage ID
    return any(task.content == candidate.content and task.category == candidate.category for task in week_tasks)


def _clone(task: Task, *, work_week: str, repeat_weekly: bool) -> Task:
    return Task(
        id=record_store.new_task_id(),
        member_id=task.member_id,
        content=task.content,
        weight=task.weight,
        category=task.category,
        work_week=work_week,
        notes=task.notes or "",
        priority=task.priority,
        repeat_weekly=repeat_weekly,
        assigned_to=task.assigned_to,
        is_done=False,
        created_at=record_store.now_millis(),
    )


async def propagate_repeating_tasks(
    *,
    all_tasks: list[Task],
    week_tasks: list[Task],
    week_key: str,
    context: WeekContext,
) -> int:
    """Clone last week's repeating tasks into the current week.

    Args:
        all_tasks: Every task visible to the caller
        week_tasks: Tasks already in `week_key`
        week_key: The week being loaded
        context: Real-world moment used to decide whether propagation runs

    Returns:
        Number of tasks created
    """
    if week_key != context.current_week:
        return 0

    candidates = [
        task for task in all_tasks if task.work_week == context.previous_real_week and task.repeat_weekly
    ]

    created = 0
    for candidate in candidates:
        if _is_already_propagated(candidate, week_tasks):
            continue

        clone = _clone(candidate, work_week=week_key, repeat_weekly=True)
        try:
            await record_store.append_task(clone)
        except StoreWriteError as e:
            logger.error(
                "repeat_propagation_failed",
                extra={"source_task_id": candidate.id, "week": week_key, "error": str(e)},
            )
            continue
        week_tasks.append(clone)
        created += 1

    if created:
        log_with_week_context(logger, "info", "Propagated repeating tasks", week=week_key, created_count=created)
    return created


async def load_week(week_key: str, owner: str | None = None, *, now: datetime | None = None) -> list[Task]:
    """Return the authoritative task set for a week.

    When `week_key` is the real current week, repeating tasks from the
    previous real week are propagated first and the set is re-fetched so the
    result carries the stored rows.

    Args:
        week_key: Week to load
        owner: Only tasks created by this member
        now: Real-world moment (defaults to the current time)

    Returns:
        Tasks in the week; empty if the store cannot be read

    Raises:
        InputValidationError: If `week_key` is not a valid week key
    """
    with span("task_service.load_week", week=week_key, owner=owner):
        parse_week_key(week_key)
        context = WeekContext.for_now(week_key, now=now)

        all_tasks = await list_tasks(owner=owner)
        week_tasks = tasks_in_week(all_tasks, week_key)

        created = await propagate_repeating_tasks(
            all_tasks=all_tasks,
            week_tasks=list(week_tasks),
            week_key=week_key,
            context=context,
        )
        if created:
            week_tasks = tasks_in_week(await list_tasks(owner=owner), week_key)

        logger.debug("Loaded week %s: %d tasks", week_key, len(week_tasks))
        return week_tasks


def compute_active_order(tasks: Iterable[Task]) -> list[Task]:
    """Canonical ordering for pending work: priority, then weight, then newest first.

    Ties beyond created_at keep their input order.
    """
    return sorted(tasks, key=lambda task: (task.priority_rank, task.weight, task.created_at), reverse=True)


def sort_by_manual_order(tasks: Iterable[Task]) -> list[Task]:
    """Ordering set by drag-and-drop reorder (ascending `order`, stable)."""
    return sorted(tasks, key=lambda task: task.order)


def pending_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if not task.is_done]


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if task.is_done]


def filter_by_category(tasks: Iterable[Task], category: str | None) -> list[Task]:
    """Tasks in one category; no filter when `category` is None."""
    if category is None:
        return list(tasks)
    return [task for task in tasks if task.category == category]


def tasks_for_member(tasks: Iterable[Task], member_id: str) -> list[Task]:
    """Tasks whose effective owner (assignee, else creator) is the member."""
    return [task for task in tasks if task.owner == member_id]


def build_task(payload: TaskCreate, *, now: datetime | None = None) -> Task:
    """Validate a create payload and build the task with a fresh id and timestamp.

    Raises:
        InputValidationError: If content or memberId is missing, or workWeek is malformed
    """
    if not payload.content or not payload.content.strip():
        raise InputValidationError("Task content is required")
    if not payload.member_id:
        raise InputValidationError("memberId is required")

    if payload.work_week:
        parse_week_key(payload.work_week)
        work_week = payload.work_week
    else:
        work_week = WeekContext.for_now(now=now).current_week

    return Task(
        id=record_store.new_task_id(),
        member_id=payload.member_id,
        content=payload.content.strip(),
        weight=payload.weight,
        category=payload.category or constants.DEFAULT_CATEGORY,
        work_week=work_week,
        notes=payload.notes,
        priority=payload.priority,
        repeat_weekly=payload.repeat_weekly,
        assigned_to=payload.assigned_to or None,
        order=payload.order,
        is_done=False,
        created_at=record_store.now_millis(),
    )


async def create_task(payload: TaskCreate, *, now: datetime | None = None) -> Task:
    """Create and persist a task.

    Raises:
        InputValidationError: If required fields are missing
        StoreWriteError: If the append fails
    """
    with span("task_service.create_task"):
        task = build_task(payload, now=now)
        await record_store.append_task(task)
        log_with_week_context(
            logger, "info", "Created task", week=task.work_week, member_id=task.member_id, task_id=task.id
        )
        return task


def validate_task_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Check a partial update keyed by Task attribute name and coerce its values.

    Nulls are dropped except for fields that may be cleared (priority, assignee).

    Raises:
        InputValidationError: If a field is unknown or not updatable, a value is
            invalid, or nothing is left to update
    """
    rejected = sorted(set(fields) - UPDATABLE_TASK_FIELDS)
    if rejected:
        msg = f"Fields cannot be updated: {', '.join(rejected)}"
        raise InputValidationError(msg)

    try:
        changed = TaskUpdate.model_validate(fields).changed_fields()
    except ValidationError as e:
        msg = f"Invalid task fields: {', '.join(str(err['loc'][0]) for err in e.errors())}"
        raise InputValidationError(msg) from e

    if not changed:
        raise InputValidationError("No updatable fields supplied")
    return changed


async def edit_task(task_id: str, fields: dict[str, Any]) -> Task | None:
    """Apply a partial update. Returns None (no-op) if the task does not exist.

    Raises:
        InputValidationError: If the fields are invalid (see validate_task_fields)
        StoreWriteError: If the update fails
    """
    with span("task_service.edit_task", task_id=task_id):
        changed = validate_task_fields(fields)
        return await record_store.update_task_fields(task_id, changed)


async def set_done(task_id: str, is_done: bool) -> Task | None:
    """Persist a completion flag."""
    return await edit_task(task_id, {"is_done": is_done})


async def toggle_done(task_id: str) -> Task | None:
    """Flip a task's completion flag in the store.

    Returns:
        The updated task, or None if the task does not exist

    Raises:
        StoreWriteError: If the current value cannot be read or the update fails
    """
    with span("task_service.toggle_done"):
        try:
            tasks = await record_store.list_tasks()
        except StoreReadError as e:
            raise StoreWriteError(str(e)) from e

        task = next((t for t in tasks if t.id == task_id), None)
        if task is None:
            logger.info("Toggle requested for unknown task %s", task_id)
            return None
        return await set_done(task_id, not task.is_done)


async def delete_task(task_id: str) -> None:
    """Delete a task; deleting an unknown ID is a no-op.

    Raises:
        StoreWriteError: If the delete fails
    """
    with span("task_service.delete_task"):
        await record_store.delete_task(task_id)


async def clear_completed(week_tasks: Iterable[Task]) -> BatchResult:
    """Delete every completed task in the set, one at a time, best effort."""
    with span("task_service.clear_completed"):
        result = BatchResult()
        for task in completed_tasks(week_tasks):
            try:
                await record_store.delete_task(task.id)
                result.succeeded.append(task.id)
            except StoreWriteError as e:
                logger.error("clear_completed_item_failed", extra={"task_id": task.id, "error": str(e)})
                result.failed.append(task.id)

        logger.info("Cleared completed tasks: %d deleted, %d failed", len(result.succeeded), len(result.failed))
        return result


async def copy_to_next_week(task: Task) -> Task:
    """Create a copy of the task in the following week. The original is untouched.

    Raises:
        StoreWriteError: If the append fails
    """
    with span("task_service.copy_to_next_week"):
        copy = _clone(task, work_week=next_week(task.work_week), repeat_weekly=task.repeat_weekly)
        await record_store.append_task(copy)
        log_with_week_context(
            logger, "info", "Copied task to next week", week=copy.work_week, source_task_id=task.id, task_id=copy.id
        )
        return copy


async def copy_all_pending_to_next_week(week_tasks: Iterable[Task]) -> BatchResult:
    """Copy every pending task into the following week, best effort."""
    with span("task_service.copy_all_pending_to_next_week"):
        result = BatchResult()
        for task in pending_tasks(week_tasks):
            try:
                await copy_to_next_week(task)
                result.succeeded.append(task.id)
            except StoreWriteError as e:
                logger.error("copy_pending_item_failed", extra={"task_id": task.id, "error": str(e)})
                result.failed.append(task.id)
        return result


async def apply_order_updates(updates: Iterable[OrderUpdate]) -> BatchResult:
    """Persist manual order values, each update independently."""
    with span("task_service.apply_order_updates"):
        result = BatchResult()
        for update in updates:
            try:
                await record_store.update_task_fields(update.id, {"order": update.order})
                result.succeeded.append(update.id)
            except StoreWriteError as e:
                logger.error("reorder_item_failed", extra={"task_id": update.id, "error": str(e)})
                result.failed.append(update.id)
        return result


async def reorder(ordered_tasks: Iterable[Task]) -> BatchResult:
    """Set each task's order to its index in the given sequence and persist it."""
    updates = [OrderUpdate(id=task.id, order=index) for index, task in enumerate(ordered_tasks)]
    return await apply_order_updates(updates)
