"""Pytest configuration and fixtures for unit tests."""

from datetime import datetime

import pytest

from weekboard.core.config import settings
from weekboard.domain.category import Category
from weekboard.domain.member import Member
from weekboard.domain.rows import CATEGORY_HEADERS, MEMBER_HEADERS, TASK_HEADERS, encode_member, encode_task
from weekboard.domain.task import Task
from tests.unit.mocks import CURRENT_WEEK, FIXED_NOW, InMemorySheets


@pytest.fixture
def sheets():
    """Provides a fresh InMemorySheets for each test."""
    return InMemorySheets()


@pytest.fixture
def patched_sheets(monkeypatch, sheets):
    """Patches weekboard.core.sheets_client functions to use InMemorySheets."""
    monkeypatch.setattr("weekboard.core.sheets_client.get_rows", sheets.get_rows)
    monkeypatch.setattr("weekboard.core.sheets_client.append_row", sheets.append_row)
    monkeypatch.setattr("weekboard.core.sheets_client.update_row", sheets.update_row)
    monkeypatch.setattr("weekboard.core.sheets_client.delete_row", sheets.delete_row)
    monkeypatch.setattr("weekboard.core.sheets_client.ensure_header", sheets.ensure_header)
    return sheets


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults.

    Usage:
        task = make_task(content="Edit teaser", weight=3, work_week="2025-01-06")
    """
    counter = {"value": 0}

    def _make_task(**kwargs) -> Task:
        counter["value"] += 1
        data = {
            "id": f"task-{counter['value']}",
            "member_id": "alice@x.com",
            "content": f"Task {counter['value']}",
            "weight": 1,
            "category": "edit",
            "work_week": CURRENT_WEEK,
            "created_at": 1_736_000_000_000 + counter["value"],
        }
        data.update(kwargs)
        return Task(**data)

    return _make_task


@pytest.fixture
def seed_tasks(patched_sheets):
    """Write tasks to the in-memory Tasks tab (replacing its contents)."""

    def _seed(tasks: list[Task]) -> None:
        patched_sheets.seed(settings.tasks_tab, TASK_HEADERS, [encode_task(task) for task in tasks])

    return _seed


@pytest.fixture
def sample_members(patched_sheets) -> list[Member]:
    """Alice (capacity 15) and Bob (capacity 10) in the Members tab."""
    members = [
        Member(email="alice@x.com", name="Alice", avatar_url="https://img/alice.png", max_points=15, created_at=1),
        Member(email="bob@x.com", name="Bob", max_points=10, created_at=2),
    ]
    patched_sheets.seed(settings.members_tab, MEMBER_HEADERS, [encode_member(member) for member in members])
    return members


@pytest.fixture
def sample_categories(patched_sheets) -> list[Category]:
    """Seeded categories in the Categories tab."""
    rows = [["camera", "Camera", "2"], ["edit", "Edit", "3"], ["sound", "Sound", ""]]
    patched_sheets.seed(settings.categories_tab, CATEGORY_HEADERS, rows)
    return [
        Category(id="camera", name="Camera", default_points=2),
        Category(id="edit", name="Edit", default_points=3),
        Category(id="sound", name="Sound", default_points=1),
    ]
