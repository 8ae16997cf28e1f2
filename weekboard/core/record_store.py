"""Entity-typed record store on top of the spreadsheet client.

Reads fetch the whole tab and decode it. Updates are read-modify-write: the tab
is re-read, the row located by its key column, merged with the new fields and
written back whole. Two concurrent updates to the same record can therefore
race, and the later write silently overwrites fields changed by the earlier
one. Deletes also locate the row by re-reading, so a row shifted by a
concurrent delete can be missed (treated as not found).
"""

import logging
import time
import uuid
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from weekboard.core import sheets_client
from weekboard.core.config import settings
from weekboard.core.errors import InputValidationError, StoreReadError, StoreWriteError
from weekboard.domain.category import Category
from weekboard.domain.member import Member
from weekboard.domain.rows import (
    MEMBER_HEADERS,
    TASK_HEADERS,
    data_rows,
    decode_category,
    decode_member,
    decode_task,
    encode_member,
    encode_task,
)
from weekboard.domain.task import Task


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def new_task_id() -> str:
    """Generate an opaque task ID."""
    return str(uuid.uuid4())


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


async def _read_tab(tab: str) -> list[list[str]]:
    try:
        return await sheets_client.get_rows(tab)
    except sheets_client.SheetsAPIError as e:
        logger.warning("store_read_failed", extra={"tab": tab, "error": str(e)})
        msg = f"Failed to read {tab}: {e}"
        raise StoreReadError(msg) from e


async def _append(tab: str, header: list[str], row: list[str]) -> None:
    try:
        await sheets_client.ensure_header(tab, header)
        await sheets_client.append_row(tab, row)
    except sheets_client.SheetsAPIError as e:
        logger.error("store_append_failed", extra={"tab": tab, "error": str(e)})
        msg = f"Failed to append to {tab}: {e}"
        raise StoreWriteError(msg) from e


async def _find_row(tab: str, key: str) -> tuple[int, list[str]] | None:
    """Locate a data row by key column, re-reading the tab. Read failures become write failures."""
    try:
        rows = await _read_tab(tab)
    except StoreReadError as e:
        raise StoreWriteError(str(e)) from e

    for index, row in data_rows(rows):
        if row[0] == key:
            return index, row
    return None


def _merge(record: ModelT, fields: dict[str, Any]) -> ModelT:
    """Apply fields to a decoded record, validating the result like a freshly built model."""
    try:
        return type(record).model_validate({**record.model_dump(), **fields})
    except ValidationError as e:
        msg = f"Invalid fields for {type(record).__name__}: {sorted(fields)}"
        raise InputValidationError(msg) from e


# === Tasks ===


async def list_tasks(*, owner: str | None = None) -> list[Task]:
    """List all tasks, optionally only those created by one member.

    Raises:
        StoreReadError: If the tab cannot be read
    """
    rows = await _read_tab(settings.tasks_tab)
    tasks = [decode_task(row) for _, row in data_rows(rows)]
    if owner:
        tasks = [task for task in tasks if task.member_id == owner]

    logger.debug("Listed tasks", extra={"count": len(tasks), "owner": owner})
    return tasks


async def append_task(task: Task) -> None:
    """Append a task row.

    Raises:
        StoreWriteError: If the append fails
    """
    await _append(settings.tasks_tab, TASK_HEADERS, encode_task(task))
    logger.info("Appended task", extra={"task_id": task.id, "work_week": task.work_week})


async def update_task_fields(task_id: str, fields: dict[str, Any]) -> Task | None:
    """Apply a partial update to a task.

    Args:
        task_id: ID of the task to update
        fields: Task attribute names mapped to new values

    Returns:
        The merged task, or None if no task has this ID (no-op)

    Raises:
        InputValidationError: If the merged task would be invalid
        StoreWriteError: If re-reading or writing the row fails
    """
    found = await _find_row(settings.tasks_tab, task_id)
    if found is None:
        logger.info("Task not found for update", extra={"task_id": task_id})
        return None

    index, row = found
    merged = _merge(decode_task(row), fields)
    try:
        await sheets_client.update_row(settings.tasks_tab, index + 1, encode_task(merged))
    except sheets_client.SheetsAPIError as e:
        logger.error("store_update_failed", extra={"task_id": task_id, "error": str(e)})
        msg = f"Failed to update task {task_id}: {e}"
        raise StoreWriteError(msg) from e

    logger.info("Updated task", extra={"task_id": task_id, "fields": sorted(fields)})
    return merged


async def delete_task(task_id: str) -> bool:
    """Delete a task row.

    Returns:
        True if a row was deleted, False if no task has this ID

    Raises:
        StoreWriteError: If locating or deleting the row fails
    """
    found = await _find_row(settings.tasks_tab, task_id)
    if found is None:
        logger.info("Task not found for delete", extra={"task_id": task_id})
        return False

    index, _ = found
    try:
        await sheets_client.delete_row(settings.tasks_tab, index)
    except sheets_client.SheetsAPIError as e:
        logger.error("store_delete_failed", extra={"task_id": task_id, "error": str(e)})
        msg = f"Failed to delete task {task_id}: {e}"
        raise StoreWriteError(msg) from e

    logger.info("Deleted task", extra={"task_id": task_id})
    return True


# === Members ===


async def list_members() -> list[Member]:
    """List all registered members.

    Raises:
        StoreReadError: If the tab cannot be read
    """
    rows = await _read_tab(settings.members_tab)
    return [decode_member(row) for _, row in data_rows(rows)]


async def append_member(member: Member) -> None:
    """Append a member row.

    Raises:
        StoreWriteError: If the append fails
    """
    await _append(settings.members_tab, MEMBER_HEADERS, encode_member(member))
    logger.info("Appended member", extra={"member_id": member.email})


async def update_member_fields(email: str, fields: dict[str, Any]) -> Member | None:
    """Apply a partial update to a member; same read-modify-write semantics as tasks.

    Returns:
        The merged member, or None if no member has this email
    """
    found = await _find_row(settings.members_tab, email)
    if found is None:
        logger.info("Member not found for update", extra={"member_id": email})
        return None

    index, row = found
    merged = _merge(decode_member(row), fields)
    try:
        await sheets_client.update_row(settings.members_tab, index + 1, encode_member(merged))
    except sheets_client.SheetsAPIError as e:
        logger.error("store_update_failed", extra={"member_id": email, "error": str(e)})
        msg = f"Failed to update member {email}: {e}"
        raise StoreWriteError(msg) from e

    logger.info("Updated member", extra={"member_id": email, "fields": sorted(fields)})
    return merged


# === Categories ===


async def list_categories() -> list[Category]:
    """List all categories.

    Raises:
        StoreReadError: If the tab cannot be read
    """
    rows = await _read_tab(settings.categories_tab)
    return [decode_category(row) for _, row in data_rows(rows)]
