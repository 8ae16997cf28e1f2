"""HTTP surface for capacity and report aggregates.

Reports read the stored task set as is; they never trigger repeat-task
propagation.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query

from weekboard.core.config import settings
from weekboard.core.errors import InputValidationError
from weekboard.interface.auth import require_principal
from weekboard.models.service_models import MemberCapacity, MemberWorkload, MonthlyReport, TrendPoint, WeekSummary
from weekboard.services import capacity_service, category_service, member_service, task_service
from weekboard.services.week_calendar import WeekContext, prev_week, week_keys_ending


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(require_principal)])

MAX_TREND_WEEKS = 52


def _selected_week(week: str | None) -> str:
    return WeekContext.for_now(week).selected_week


def _parse_month(month: str | None) -> tuple[int, int]:
    if not month:
        now = datetime.now().astimezone()
        return now.year, now.month
    try:
        parsed = datetime.strptime(month, "%Y-%m")
    except ValueError as e:
        msg = f"Invalid month: {month!r}. Expected YYYY-MM"
        raise InputValidationError(msg) from e
    return parsed.year, parsed.month


@router.get("/week", response_model=WeekSummary)
async def get_week_summary(week: str | None = None, owner: str | None = None) -> WeekSummary:
    """Points for the week compared with the previous week."""
    week_key = _selected_week(week)
    tasks = await task_service.list_tasks(owner=owner)
    return capacity_service.week_summary(
        week_key,
        task_service.tasks_in_week(tasks, week_key),
        task_service.tasks_in_week(tasks, prev_week(week_key)),
    )


@router.get("/capacity", response_model=list[MemberCapacity])
async def get_capacity(week: str | None = None) -> list[MemberCapacity]:
    """Each member's load this week and next against their capacity."""
    week_key = _selected_week(week)
    members = await member_service.list_members()
    tasks = await task_service.list_tasks()
    return capacity_service.capacity_forecast(members, tasks, week_key)


@router.get("/workload", response_model=list[MemberWorkload])
async def get_workload(week: str | None = None) -> list[MemberWorkload]:
    """Points per member for the week."""
    week_key = _selected_week(week)
    members = await member_service.list_members()
    tasks = task_service.tasks_in_week(await task_service.list_tasks(), week_key)
    return capacity_service.workload_by_member(tasks, members)


@router.get("/trend", response_model=list[TrendPoint])
async def get_trend(
    week: str | None = None,
    weeks: int = Query(default=settings.trend_weeks, ge=1, le=MAX_TREND_WEEKS),
    owner: str | None = None,
) -> list[TrendPoint]:
    """Total and completed points for the weeks ending at `week`, oldest first."""
    week_keys = week_keys_ending(_selected_week(week), weeks)
    return capacity_service.weekly_trend(week_keys, await task_service.list_tasks(owner=owner))


@router.get("/categories")
async def get_category_breakdown(week: str | None = None, owner: str | None = None) -> dict[str, Any]:
    """Category breakdown and top category for the week."""
    week_key = _selected_week(week)
    tasks = task_service.tasks_in_week(await task_service.list_tasks(owner=owner), week_key)
    categories = await category_service.list_categories()
    breakdown = capacity_service.category_breakdown(tasks, categories)
    return {
        "weekKey": week_key,
        "topCategory": capacity_service.top_category(tasks),
        "categories": [stat.model_dump(by_alias=True) for stat in breakdown],
    }


@router.get("/month", response_model=MonthlyReport)
async def get_monthly_report(month: str | None = None) -> MonthlyReport:
    """Completed work for tasks created in the month (YYYY-MM, default current month)."""
    year, month_number = _parse_month(month)
    tasks = await task_service.list_tasks()
    members = await member_service.list_members()
    categories = await category_service.list_categories()
    return capacity_service.monthly_report(tasks, members, categories, year=year, month=month_number)
