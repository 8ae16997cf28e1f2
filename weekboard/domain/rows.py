"""Row codecs between spreadsheet rows and domain models.

Cells arrive as strings. Each entity has exactly one decode and one encode
function holding all of its default-fallback rules:

- numbers that are blank or not integers decode to a per-field default
- booleans are true only for the exact cell value "TRUE"
- blank optional text decodes to None (or "" for notes)
"""

from weekboard.core.config import constants, settings
from weekboard.domain.category import Category
from weekboard.domain.member import Member
from weekboard.domain.task import Task, TaskPriority


TASK_HEADERS = [
    "id",
    "memberId",
    "content",
    "weight",
    "isDone",
    "createdAt",
    "category",
    "workWeek",
    "notes",
    "priority",
    "repeatWeekly",
    "assignedTo",
    "order",
]
MEMBER_HEADERS = ["email", "name", "avatarUrl", "createdAt", "maxPoints"]
CATEGORY_HEADERS = ["id", "name", "defaultPoints"]


def _cell(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] is not None else ""


def _int_cell(row: list[str], index: int, default: int) -> int:
    value = _cell(row, index)
    try:
        return int(float(value)) if value else default
    except ValueError:
        return default


def _bool_cell(row: list[str], index: int) -> bool:
    return _cell(row, index) == constants.TRUE_CELL


def _encode_bool(value: bool) -> str:
    return constants.TRUE_CELL if value else constants.FALSE_CELL


def _priority_cell(row: list[str], index: int) -> TaskPriority | None:
    try:
        return TaskPriority(_cell(row, index))
    except ValueError:
        return None


def decode_task(row: list[str]) -> Task:
    """Decode a Tasks row into a Task."""
    return Task(
        id=_cell(row, 0),
        member_id=_cell(row, 1),
        content=_cell(row, 2),
        weight=_int_cell(row, 3, 0),
        is_done=_bool_cell(row, 4),
        created_at=_int_cell(row, 5, 0),
        category=_cell(row, 6) or constants.DEFAULT_CATEGORY,
        work_week=_cell(row, 7) or constants.DEFAULT_WORK_WEEK,
        notes=_cell(row, 8),
        priority=_priority_cell(row, 9),
        repeat_weekly=_bool_cell(row, 10),
        assigned_to=_cell(row, 11) or None,
        order=_int_cell(row, 12, 0),
    )


def encode_task(task: Task) -> list[str]:
    """Encode a Task into a Tasks row, in TASK_HEADERS column order."""
    return [
        task.id,
        task.member_id,
        task.content,
        str(task.weight),
        _encode_bool(task.is_done),
        str(task.created_at),
        task.category,
        task.work_week,
        task.notes or "",
        task.priority.value if task.priority else "",
        _encode_bool(task.repeat_weekly),
        task.assigned_to or "",
        str(task.order),
    ]


def decode_member(row: list[str]) -> Member:
    """Decode a Members row. A blank, invalid or zero maxPoints falls back to the default capacity."""
    created_at = _int_cell(row, 3, 0)
    return Member(
        email=_cell(row, 0),
        name=_cell(row, 1),
        avatar_url=_cell(row, 2),
        created_at=created_at or None,
        max_points=_int_cell(row, 4, 0) or settings.default_capacity,
    )


def encode_member(member: Member) -> list[str]:
    """Encode a Member into a Members row."""
    return [
        member.email,
        member.name,
        member.avatar_url,
        str(member.created_at) if member.created_at is not None else "",
        str(member.max_points),
    ]


def decode_category(row: list[str]) -> Category:
    """Decode a Categories row."""
    return Category(
        id=_cell(row, 0),
        name=_cell(row, 1),
        default_points=_int_cell(row, 2, 0) or constants.DEFAULT_CATEGORY_POINTS,
    )


def data_rows(rows: list[list[str]]) -> list[tuple[int, list[str]]]:
    """Pair each non-header row with its 0-based index, skipping rows with a blank key column."""
    return [(index, row) for index, row in enumerate(rows) if index > 0 and _cell(row, 0)]
