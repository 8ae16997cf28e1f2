"""Capacity and report aggregation over task snapshots.

This module provides pure functions for:
- Point totals and per-member load against capacity
- Capacity forecasts for the selected and following week
- Weekly trend series, week-over-week summaries and category breakdowns
- Monthly reports of completed work

Key Concepts:
- Load: summed weight of the tasks whose effective owner (assignee, else
  creator) is the member. Completed and pending tasks both count, since
  capacity is a planning budget.
- Capacity: the member's maxPoints; unset or zero falls back to the
  configured default (15).
- Ties in "top" rankings go to the first category encountered.

Nothing here touches the store.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from weekboard.core.config import constants, settings
from weekboard.domain.category import Category
from weekboard.domain.member import Member
from weekboard.domain.task import Task
from weekboard.models.service_models import (
    CategoryStat,
    LoadStatus,
    MemberCapacity,
    MemberReport,
    MemberWorkload,
    MonthlyReport,
    TrendPoint,
    WeekSummary,
)
from weekboard.services.week_calendar import next_week, week_range_label


def _capacity(capacity: int | None) -> int:
    return capacity or settings.default_capacity


def points_total(tasks: Iterable[Task]) -> int:
    """Sum of task weights."""
    return sum(task.weight for task in tasks)


def member_load(tasks: Iterable[Task], member_id: str) -> int:
    """Summed weight of the tasks whose effective owner is the member."""
    return points_total(task for task in tasks if task.owner == member_id)


def usage_rate(load: int, capacity: int | None = None) -> float:
    """Load as a percentage of capacity."""
    return load / _capacity(capacity) * 100


def over_limit(load: int, capacity: int | None = None) -> bool:
    """Whether the load exceeds the capacity."""
    return load > _capacity(capacity)


def load_status(load: int, capacity: int | None = None) -> LoadStatus:
    """Capacity indicator band: over 100% is over, over 80% is a warning."""
    rate = usage_rate(load, capacity)
    if rate > constants.USAGE_OVER_PERCENT:
        return LoadStatus.OVER
    if rate > constants.USAGE_WARNING_PERCENT:
        return LoadStatus.WARNING
    return LoadStatus.OK


def _points_by_category(tasks: Iterable[Task]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for task in tasks:
        totals[task.category] = totals.get(task.category, 0) + task.weight
    return totals


def top_category(tasks: Iterable[Task]) -> str | None:
    """Category with the most summed weight; first encountered wins a tie."""
    best: str | None = None
    best_points = -1
    for category_id, points in _points_by_category(tasks).items():
        if points > best_points:
            best, best_points = category_id, points
    return best


def weekly_trend(week_keys: Sequence[str], all_tasks: Iterable[Task]) -> list[TrendPoint]:
    """Total and completed points for each week key, in the given order."""
    tasks = list(all_tasks)
    trend = []
    for week_key in week_keys:
        week_tasks = [task for task in tasks if task.work_week == week_key]
        trend.append(
            TrendPoint(
                week_key=week_key,
                total=points_total(week_tasks),
                completed=points_total(task for task in week_tasks if task.is_done),
            )
        )
    return trend


def category_name(category_id: str, categories: Iterable[Category]) -> str:
    """Display name for a category, the raw ID when unknown."""
    return next((category.name for category in categories if category.id == category_id), category_id)


def category_breakdown(tasks: Iterable[Task], categories: Sequence[Category]) -> list[CategoryStat]:
    """Count and points per category, most points first.

    Known categories are listed even without tasks. Task categories with no
    matching record ("other", dangling IDs) follow in first-seen order, named
    by their raw ID.
    """
    stats = {
        category.id: CategoryStat(category_id=category.id, name=category.name, count=0, points=0)
        for category in categories
    }
    for task in tasks:
        stat = stats.get(task.category)
        if stat is None:
            stat = CategoryStat(
                category_id=task.category, name=category_name(task.category, categories), count=0, points=0
            )
            stats[task.category] = stat
        stat.count += 1
        stat.points += task.weight
    return sorted(stats.values(), key=lambda stat: stat.points, reverse=True)


def member_name(member_id: str, members: Iterable[Member]) -> str:
    """Display name for a member, the raw ID when unknown."""
    return next((member.name or member.email for member in members if member.email == member_id), member_id)


def capacity_forecast(members: Sequence[Member], tasks: Iterable[Task], week_key: str) -> list[MemberCapacity]:
    """Each member's load for `week_key` and the week after, against capacity."""
    task_list = list(tasks)
    following_week = next_week(week_key)

    forecast = []
    for member in members:
        owned = [task for task in task_list if task.owner == member.email]
        current_load = points_total(task for task in owned if task.work_week == week_key)
        next_load = points_total(task for task in owned if task.work_week == following_week)
        capacity = _capacity(member.max_points)
        forecast.append(
            MemberCapacity(
                member_id=member.email,
                name=member.name or member.email,
                current_load=current_load,
                next_load=next_load,
                capacity=capacity,
                usage_rate=usage_rate(current_load, capacity),
                status=load_status(current_load, capacity),
                over_limit=over_limit(current_load, capacity),
            )
        )
    return forecast


def _workload_status(points: int) -> LoadStatus:
    if points > constants.WORKLOAD_OVER_POINTS:
        return LoadStatus.OVER
    if points > constants.WORKLOAD_WARNING_POINTS:
        return LoadStatus.WARNING
    return LoadStatus.OK


def workload_by_member(tasks: Iterable[Task], members: Sequence[Member] = ()) -> list[MemberWorkload]:
    """Summed points per creating member, in first-seen order."""
    totals: dict[str, int] = {}
    for task in tasks:
        totals[task.member_id] = totals.get(task.member_id, 0) + task.weight

    return [
        MemberWorkload(
            member_id=member_id,
            name=member_name(member_id, members),
            points=points,
            status=_workload_status(points),
        )
        for member_id, points in totals.items()
    ]


def _completion_rate(completed: int, total: int) -> int:
    return round(completed / total * 100) if total > 0 else 0


def week_summary(week_key: str, current_week_tasks: Sequence[Task], previous_week_tasks: Sequence[Task]) -> WeekSummary:
    """Points for the week compared with the week before."""
    total = points_total(current_week_tasks)
    completed = points_total(task for task in current_week_tasks if task.is_done)
    previous_total = points_total(previous_week_tasks)
    previous_completed = points_total(task for task in previous_week_tasks if task.is_done)

    return WeekSummary(
        week_key=week_key,
        label=week_range_label(week_key),
        total=total,
        pending=total - completed,
        completed=completed,
        diff_from_previous=total - previous_total,
        completion_rate=_completion_rate(completed, total),
        previous_completion_rate=_completion_rate(previous_completed, previous_total),
    )


def _created_in_month(task: Task, year: int, month: int) -> bool:
    created = datetime.fromtimestamp(task.created_at / 1000, tz=UTC)
    return created.year == year and created.month == month


def monthly_report(
    tasks: Iterable[Task],
    members: Sequence[Member],
    categories: Sequence[Category],
    *,
    year: int,
    month: int,
) -> MonthlyReport:
    """Completed work for tasks created in the given month (UTC)."""
    completed = [task for task in tasks if task.is_done and _created_in_month(task, year, month)]

    member_reports = []
    for member in members:
        owned = [task for task in completed if task.owner == member.email]
        top = top_category(owned)
        member_reports.append(
            MemberReport(
                member_id=member.email,
                name=member.name or member.email,
                avatar_url=member.avatar_url,
                points=points_total(owned),
                count=len(owned),
                top_category_name=category_name(top, categories) if top else "-",
            )
        )

    return MonthlyReport(
        month=f"{year:04d}-{month:02d}",
        total_points=points_total(completed),
        completed_count=len(completed),
        members=sorted(member_reports, key=lambda report: report.points, reverse=True),
        categories=category_breakdown(completed, categories),
    )
