"""Update models for store operations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from weekboard.domain.task import TaskPriority


# A null for these means "clear it"; for every other field a null keeps the stored value
CLEARABLE_TASK_FIELDS = frozenset({"priority", "assigned_to"})


class TaskUpdate(BaseModel):
    """Partial task update. Only fields present in the payload are applied.

    Identity, ownership, week and creation time are not updatable.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    content: str | None = None
    weight: int | None = None
    category: str | None = None
    notes: str | None = None
    priority: TaskPriority | None = None
    repeat_weekly: bool | None = Field(default=None, alias="repeatWeekly")
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    order: int | None = None
    is_done: bool | None = Field(default=None, alias="isDone")

    def changed_fields(self) -> dict[str, Any]:
        """Return the explicitly supplied fields, keyed by Task attribute name."""
        supplied = self.model_dump(exclude_unset=True, exclude={"id"})
        return {
            name: value for name, value in supplied.items() if value is not None or name in CLEARABLE_TASK_FIELDS
        }


class MemberUpdate(BaseModel):
    """Profile update for a member."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    name: str | None = None
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    max_points: int | None = Field(default=None, alias="maxPoints")

    def changed_fields(self) -> dict[str, Any]:
        """Return the explicitly supplied, non-null profile fields."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"email"})


class OrderUpdate(BaseModel):
    """New manual order for one task."""

    id: str
    order: int


class ReorderRequest(BaseModel):
    """Body of POST /tasks/reorder."""

    updates: list[OrderUpdate]


class CopyRequest(BaseModel):
    """Body of POST /tasks/copy-to-next-week: one task by id, or every pending task of a week."""

    id: str | None = None
    week: str | None = None
    owner: str | None = None
