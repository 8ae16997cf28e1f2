"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from weekboard.core.config import constants


class TaskPriority(StrEnum):
    """Explicit task priority; an absent priority ranks below all of these."""

    HIGH = "high"
    MID = "mid"
    LOW = "low"


class Task(BaseModel):
    """Task data transfer object.

    A task belongs to exactly one work week. Moving work to another week always
    creates a new task.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique task ID, assigned at creation")
    member_id: str = Field(..., alias="memberId", description="Owner (creator) member email")
    content: str = Field(..., description="Task description")
    weight: int = Field(default=0, description="Point value, 1-5 by convention")
    category: str = Field(default=constants.DEFAULT_CATEGORY, description="Category ID")
    work_week: str = Field(..., alias="workWeek", description="Week key (ISO date of the Monday)")
    notes: str = Field(default="", description="Free-form notes")
    priority: TaskPriority | None = Field(default=None, description="Optional explicit priority")
    repeat_weekly: bool = Field(default=False, alias="repeatWeekly", description="Clone into the following week")
    assigned_to: str | None = Field(default=None, alias="assignedTo", description="Member expected to do the work")
    order: int = Field(default=0, description="Manual ordering index")
    is_done: bool = Field(default=False, alias="isDone", description="Completion flag")
    created_at: int = Field(..., alias="createdAt", description="Creation time in epoch milliseconds")

    @property
    def owner(self) -> str:
        """Member the task's load counts against."""
        return self.assigned_to or self.member_id

    @property
    def priority_rank(self) -> int:
        """Numeric rank used for active ordering (high=3 ... absent=0)."""
        if self.priority is None:
            return 0
        return constants.PRIORITY_RANKS[self.priority.value]
