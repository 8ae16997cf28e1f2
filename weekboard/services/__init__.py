from weekboard.services import (
    capacity_service,
    category_service,
    member_service,
    task_board,
    task_service,
    week_calendar,
)
from weekboard.services.task_board import OptimisticMutation, TaskBoard


__all__ = [
    "OptimisticMutation",
    "TaskBoard",
    "capacity_service",
    "category_service",
    "member_service",
    "task_board",
    "task_service",
    "week_calendar",
]
