"""Week keys and week navigation.

A week key is the ISO date (YYYY-MM-DD) of the Monday starting the week. All
functions here are pure: "now" is always passed in explicitly.
"""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, ConfigDict

from weekboard.core.errors import InputValidationError


def _as_date(value: date | datetime) -> date:
    # Time of day is dropped so every moment of a calendar day maps to the same key
    return value.date() if isinstance(value, datetime) else value


def week_key_of(value: date | datetime) -> str:
    """Return the week key of the Monday on or before the given date."""
    day = _as_date(value)
    return (day - timedelta(days=day.weekday())).isoformat()


def parse_week_key(week_key: str) -> date:
    """Parse a week key into the date of its Monday.

    Raises:
        InputValidationError: If the key is not an ISO date or not a Monday
    """
    try:
        day = date.fromisoformat(week_key)
    except (TypeError, ValueError) as e:
        msg = f"Invalid week key: {week_key!r}. Expected YYYY-MM-DD"
        raise InputValidationError(msg) from e

    if day.weekday() != 0:
        msg = f"Invalid week key: {week_key} is not a Monday"
        raise InputValidationError(msg)
    return day


def next_week(week_key: str) -> str:
    """Week key seven days after the given one."""
    return (date.fromisoformat(week_key) + timedelta(days=7)).isoformat()


def prev_week(week_key: str) -> str:
    """Week key seven days before the given one."""
    return (date.fromisoformat(week_key) - timedelta(days=7)).isoformat()


def shift_week(week_key: str, weeks: int) -> str:
    """Week key moved by a whole number of weeks (negative moves back)."""
    return (date.fromisoformat(week_key) + timedelta(weeks=weeks)).isoformat()


def week_keys_ending(week_key: str, count: int) -> list[str]:
    """The `count` consecutive week keys ending at `week_key`, oldest first."""
    return [shift_week(week_key, -offset) for offset in range(count - 1, -1, -1)]


def week_range_label(week_key: str) -> str:
    """Short Monday-to-Sunday label, e.g. '1/6 - 1/12'."""
    start = date.fromisoformat(week_key)
    end = start + timedelta(days=6)
    return f"{start.month}/{start.day} - {end.month}/{end.day}"


class WeekContext(BaseModel):
    """The real-world moment and the week being viewed.

    Passed explicitly to aggregation calls instead of shared global week state.
    """

    model_config = ConfigDict(frozen=True)

    now: datetime
    selected_week: str

    @classmethod
    def for_now(cls, selected: date | datetime | str | None = None, now: datetime | None = None) -> "WeekContext":
        """Build a context; the selected week defaults to the current real week."""
        now = now or datetime.now().astimezone()
        if selected is None:
            selected_week = week_key_of(now)
        elif isinstance(selected, str):
            selected_week = week_key_of(parse_week_key(selected))
        else:
            selected_week = week_key_of(selected)
        return cls(now=now, selected_week=selected_week)

    @property
    def current_week(self) -> str:
        """Week key of the real-world current moment."""
        return week_key_of(self.now)

    @property
    def previous_real_week(self) -> str:
        """Week key immediately before the real current week."""
        return prev_week(self.current_week)

    @property
    def is_current_week(self) -> bool:
        """Whether the selected week is the real current week."""
        return self.selected_week == self.current_week

    def shifted(self, weeks: int) -> "WeekContext":
        """Same moment, selected week moved by a number of weeks."""
        return self.model_copy(update={"selected_week": shift_week(self.selected_week, weeks)})
