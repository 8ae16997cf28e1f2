"""Pydantic models for creating records in the store.

Required fields are validated in the service layer so that a missing field is
reported as an InputValidationError with a descriptive message.
"""

from pydantic import BaseModel, ConfigDict, Field

from weekboard.domain.task import TaskPriority


class TaskCreate(BaseModel):
    """Payload for creating a task. The server assigns id and createdAt."""

    model_config = ConfigDict(populate_by_name=True)

    member_id: str | None = Field(default=None, alias="memberId", description="Owner member email")
    content: str | None = Field(default=None, description="Task description")
    weight: int = Field(default=1, description="Point value")
    category: str | None = Field(default=None, description="Category ID, 'other' when omitted")
    work_week: str | None = Field(default=None, alias="workWeek", description="Week key, current week when omitted")
    notes: str = Field(default="", description="Free-form notes")
    priority: TaskPriority | None = Field(default=None, description="Optional priority")
    repeat_weekly: bool = Field(default=False, alias="repeatWeekly", description="Clone into following weeks")
    assigned_to: str | None = Field(default=None, alias="assignedTo", description="Assignee member email")
    order: int = Field(default=0, description="Manual ordering index")


class MemberCreate(BaseModel):
    """Payload for registering a member."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = Field(default=None, description="Member email")
    name: str | None = Field(default=None, description="Display name")
    avatar_url: str = Field(default="", alias="avatarUrl", description="Avatar image URL")
    max_points: int | None = Field(default=None, alias="maxPoints", description="Weekly capacity budget")
