"""Pydantic models for service layer return types.

These models give the aggregation and batch services typed results that the
HTTP surface serializes directly.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class BatchResult(BaseModel):
    """Outcome of a best-effort batch; each item succeeds or fails independently."""

    succeeded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class LoadStatus(StrEnum):
    """Capacity usage band."""

    OK = "ok"
    WARNING = "warning"
    OVER = "over"


class TrendPoint(_CamelModel):
    """Weekly total and completed points."""

    week_key: str = Field(..., alias="weekKey")
    total: int
    completed: int


class CategoryStat(_CamelModel):
    """Task count and points for one category."""

    category_id: str = Field(..., alias="categoryId")
    name: str
    count: int
    points: int


class MemberCapacity(_CamelModel):
    """A member's load this week and next week against their capacity."""

    member_id: str = Field(..., alias="memberId")
    name: str
    current_load: int = Field(..., alias="currentLoad")
    next_load: int = Field(..., alias="nextLoad")
    capacity: int
    usage_rate: float = Field(..., alias="usageRate")
    status: LoadStatus
    over_limit: bool = Field(..., alias="overLimit")


class MemberWorkload(_CamelModel):
    """Summed points per task owner for the workload chart."""

    member_id: str = Field(..., alias="memberId")
    name: str
    points: int
    status: LoadStatus


class WeekSummary(_CamelModel):
    """Current week points compared with the previous week."""

    week_key: str = Field(..., alias="weekKey")
    label: str
    total: int
    pending: int
    completed: int
    diff_from_previous: int = Field(..., alias="diffFromPrevious")
    completion_rate: int = Field(..., alias="completionRate")
    previous_completion_rate: int = Field(..., alias="previousCompletionRate")


class MemberReport(_CamelModel):
    """A member's completed work within a report period."""

    member_id: str = Field(..., alias="memberId")
    name: str
    avatar_url: str = Field(default="", alias="avatarUrl")
    points: int
    count: int
    top_category_name: str = Field(..., alias="topCategoryName")


class MonthlyReport(_CamelModel):
    """Completed work for one calendar month."""

    month: str
    total_points: int = Field(..., alias="totalPoints")
    completed_count: int = Field(..., alias="completedCount")
    members: list[MemberReport]
    categories: list[CategoryStat]


class MutationResult(BaseModel):
    """Outcome of confirming an optimistic mutation against the store."""

    ok: bool
    error: str | None = None
