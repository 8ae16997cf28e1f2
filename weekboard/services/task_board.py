"""Optimistic local view of one week's tasks.

A TaskBoard holds the task list a client is showing for a (week, owner) pair.
Every mutation changes the local list immediately and returns an
OptimisticMutation; awaiting its confirm() persists the change and, if the
store write fails, reverts the local list and reports the error instead of
raising it.

Responses to refresh() that arrive after the board moved to another week or
owner, or after a newer refresh was issued, are discarded.

TaskBoard is the entry point for in-process clients (a UI or a script driving
one week at a time); the HTTP routers call task_service directly.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from weekboard.core import record_store
from weekboard.core.errors import StoreWriteError
from weekboard.domain.create_models import TaskCreate
from weekboard.domain.task import Task
from weekboard.models.service_models import MutationResult
from weekboard.services import task_service


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class OptimisticMutation(Generic[T]):
    """A mutation already applied locally, waiting to be confirmed by the store."""

    applied: T
    commit: Callable[[], Awaitable[Any]] = field(repr=False)
    rollback: Callable[[], Awaitable[None]] = field(repr=False)

    async def confirm(self) -> MutationResult:
        """Persist the mutation; on a store write failure roll the local state back."""
        try:
            await self.commit()
        except StoreWriteError as e:
            logger.warning("Optimistic mutation failed, rolling back: %s", e)
            await self.rollback()
            return MutationResult(ok=False, error=str(e))
        return MutationResult(ok=True)


class TaskBoard:
    """Client-side task list for one week, optionally for one owner."""

    def __init__(self, week_key: str, owner: str | None = None, *, now: datetime | None = None) -> None:
        self.week_key = week_key
        self.owner = owner
        self._now = now
        self._tasks: list[Task] = []
        self._request_counter = 0
        self.is_loaded = False

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def _key(self) -> tuple[str, str | None]:
        return (self.week_key, self.owner)

    def _index_of(self, task_id: str) -> int | None:
        return next((i for i, task in enumerate(self._tasks) if task.id == task_id), None)

    def _replace(self, task: Task) -> None:
        index = self._index_of(task.id)
        if index is not None:
            self._tasks[index] = task

    def select_week(self, week_key: str, owner: str | None = None) -> None:
        """Point the board at another week/owner; in-flight refreshes for the old key are discarded."""
        self.week_key = week_key
        self.owner = owner
        self._tasks = []
        self.is_loaded = False

    async def refresh(self) -> bool:
        """Reload the week from the store.

        Returns:
            True if the response was applied, False if it was stale and discarded
        """
        self._request_counter += 1
        request_id = self._request_counter
        requested_key = self._key()

        tasks = await task_service.load_week(requested_key[0], requested_key[1], now=self._now)

        if requested_key != self._key() or request_id != self._request_counter:
            logger.debug("Discarding stale task response for %s", requested_key)
            return False

        self._tasks = tasks
        self.is_loaded = True
        return True

    def add(self, payload: TaskCreate) -> OptimisticMutation[Task]:
        """Add a task to this board's week.

        Raises:
            InputValidationError: If the payload is missing required fields
        """
        payload = payload.model_copy(update={"work_week": self.week_key})
        task = task_service.build_task(payload, now=self._now)
        self._tasks.insert(0, task)

        async def rollback() -> None:
            self._tasks = [t for t in self._tasks if t.id != task.id]

        return OptimisticMutation(applied=task, commit=lambda: record_store.append_task(task), rollback=rollback)

    def toggle(self, task_id: str) -> OptimisticMutation[Task] | None:
        """Flip completion locally; None if the task is not on the board."""
        index = self._index_of(task_id)
        if index is None:
            return None

        previous = self._tasks[index]
        toggled = previous.model_copy(update={"is_done": not previous.is_done})
        self._tasks[index] = toggled

        async def rollback() -> None:
            current_index = self._index_of(task_id)
            if current_index is not None:
                self._tasks[current_index] = self._tasks[current_index].model_copy(
                    update={"is_done": previous.is_done}
                )

        return OptimisticMutation(
            applied=toggled,
            commit=lambda: task_service.set_done(task_id, toggled.is_done),
            rollback=rollback,
        )

    def edit(self, task_id: str, fields: dict[str, Any]) -> OptimisticMutation[Task] | None:
        """Apply a partial update locally; None if the task is not on the board.

        Raises:
            InputValidationError: If the fields are invalid, before the board changes
        """
        index = self._index_of(task_id)
        if index is None:
            return None

        changed = task_service.validate_task_fields(fields)
        previous = self._tasks[index]
        edited = Task.model_validate({**previous.model_dump(), **changed})
        self._tasks[index] = edited

        async def rollback() -> None:
            self._replace(previous)

        return OptimisticMutation(
            applied=edited,
            commit=lambda: task_service.edit_task(task_id, changed),
            rollback=rollback,
        )

    def remove(self, task_id: str) -> OptimisticMutation[list[Task]]:
        """Delete a task locally."""
        snapshot = list(self._tasks)
        self._tasks = [task for task in self._tasks if task.id != task_id]

        async def rollback() -> None:
            self._tasks = snapshot

        return OptimisticMutation(
            applied=self.tasks,
            commit=lambda: task_service.delete_task(task_id),
            rollback=rollback,
        )

    def reorder(self, ordered_tasks: list[Task]) -> OptimisticMutation[list[Task]]:
        """Show the new order immediately; a failed item triggers a full re-fetch."""
        self._tasks = [task.model_copy(update={"order": index}) for index, task in enumerate(ordered_tasks)]

        async def commit() -> None:
            result = await task_service.reorder(ordered_tasks)
            if not result.ok:
                msg = f"Failed to save order for {len(result.failed)} task(s)"
                raise StoreWriteError(msg)

        async def rollback() -> None:
            await self.refresh()

        return OptimisticMutation(applied=self.tasks, commit=commit, rollback=rollback)

    def clear_completed(self) -> OptimisticMutation[list[Task]]:
        """Remove completed tasks locally; tasks whose delete fails reappear in place."""
        snapshot = list(self._tasks)
        done = [task for task in snapshot if task.is_done]
        self._tasks = [task for task in snapshot if not task.is_done]
        failed_ids: list[str] = []

        async def commit() -> None:
            result = await task_service.clear_completed(done)
            if not result.ok:
                failed_ids.extend(result.failed)
                msg = f"Failed to delete {len(result.failed)} completed task(s)"
                raise StoreWriteError(msg)

        async def rollback() -> None:
            current = {task.id: task for task in self._tasks}
            restored = [current.get(task.id, task) for task in snapshot if task.id in current or task.id in failed_ids]
            snapshot_ids = {task.id for task in snapshot}
            self._tasks = restored + [task for task in self._tasks if task.id not in snapshot_ids]

        return OptimisticMutation(applied=self.tasks, commit=commit, rollback=rollback)
