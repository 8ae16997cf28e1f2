"""Domain models and DTOs."""

from weekboard.domain.category import Category
from weekboard.domain.create_models import MemberCreate, TaskCreate
from weekboard.domain.member import Member
from weekboard.domain.task import Task, TaskPriority
from weekboard.domain.update_models import MemberUpdate, OrderUpdate, ReorderRequest, TaskUpdate


__all__ = [
    "Category",
    "Member",
    "MemberCreate",
    "MemberUpdate",
    "OrderUpdate",
    "ReorderRequest",
    "Task",
    "TaskCreate",
    "TaskPriority",
    "TaskUpdate",
]
