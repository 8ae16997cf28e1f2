"""Tests for the HTTP routers."""

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from weekboard.core.config import settings
from weekboard.interface.error_handlers import register_error_handlers
from weekboard.interface.member_router import router as member_router
from weekboard.interface.report_router import router as report_router
from weekboard.interface.task_router import router as task_router


# A past week, so loading it never triggers repeat propagation
WEEK = "2025-01-06"
NEXT_WEEK = "2025-01-13"


def _jan_2025_millis(day: int) -> int:
    return int(datetime(2025, 1, day, 12, tzinfo=UTC).timestamp() * 1000)


@pytest.fixture
def client(patched_sheets) -> TestClient:
    """Create test client for the task, member and report routers."""
    test_app = FastAPI()
    register_error_handlers(test_app)
    test_app.include_router(task_router)
    test_app.include_router(member_router)
    test_app.include_router(report_router)
    return TestClient(test_app)


@pytest.fixture
def week_tasks(make_task, seed_tasks):
    tasks = [
        make_task(id="a", content="Storyboard", weight=3, category="edit", created_at=_jan_2025_millis(6)),
        make_task(id="b", content="Shoot", weight=2, category="camera", is_done=True, created_at=_jan_2025_millis(7)),
        make_task(id="c", content="Mix", weight=4, category="sound", member_id="bob@x.com"),
        make_task(
            id="old",
            content="Archive",
            work_week="2024-12-30",
            weight=5,
            is_done=True,
            created_at=int(datetime(2024, 12, 30, 12, tzinfo=UTC).timestamp() * 1000),
        ),
    ]
    seed_tasks(tasks)
    return tasks


@pytest.mark.unit
class TestAuthentication:
    """Tests for identity headers."""

    def test_missing_principal_is_401(self, client):
        response = client.get("/tasks")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_auth_can_be_disabled(self, client, monkeypatch):
        monkeypatch.setattr(settings, "require_auth", False)

        response = client.get("/tasks")

        assert response.status_code == 200


@pytest.mark.unit
class TestTaskRoutes:
    """Tests for /tasks endpoints."""

    def test_get_week(self, client, auth_headers, week_tasks):
        response = client.get("/tasks", params={"week": WEEK}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert [task["id"] for task in body] == ["a", "b", "c"]
        assert body[0]["memberId"] == "alice@x.com"
        assert body[0]["workWeek"] == WEEK
        assert body[1]["isDone"] is True

    def test_get_by_owner(self, client, auth_headers, week_tasks):
        response = client.get("/tasks", params={"email": "bob@x.com"}, headers=auth_headers)

        assert [task["id"] for task in response.json()] == ["c"]

    def test_get_invalid_week(self, client, auth_headers):
        response = client.get("/tasks", params={"week": "2025-01-07"}, headers=auth_headers)

        assert response.status_code == 400
        assert "not a Monday" in response.json()["error"]

    def test_get_with_unreadable_store_is_empty(self, client, auth_headers, patched_sheets):
        patched_sheets.fail_reads.add(settings.tasks_tab)

        response = client.get("/tasks", params={"week": WEEK}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_post_defaults_member_to_principal(self, client, auth_headers, patched_sheets):
        response = client.post(
            "/tasks",
            json={"content": "Color grade", "weight": 2, "workWeek": WEEK, "priority": "high"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"]
        assert body["memberId"] == "alice@x.com"
        assert body["category"] == "other"
        assert body["priority"] == "high"
        assert [task.content for task in patched_sheets.stored_tasks()] == ["Color grade"]

    def test_post_requires_content(self, client, auth_headers, patched_sheets):
        response = client.post("/tasks", json={"weight": 2}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Task content is required"
        assert patched_sheets.append_calls == 0

    def test_post_malformed_body(self, client, auth_headers):
        response = client.post("/tasks", json={"content": "x", "weight": "heavy"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_post_store_failure_is_500(self, client, auth_headers, patched_sheets):
        patched_sheets.fail_appends.add(settings.tasks_tab)

        response = client.post("/tasks", json={"content": "x", "workWeek": WEEK}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "ERR_STORE_WRITE"

    def test_patch_requires_id(self, client, auth_headers):
        response = client.patch("/tasks", json={"isDone": True}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing ID"

    def test_patch_requires_fields(self, client, auth_headers):
        response = client.patch("/tasks", json={"id": "a"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid data"

    def test_patch_toggles_done(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.patch("/tasks", json={"id": "a", "isDone": True}, headers=auth_headers)

        assert response.json() == {"success": True}
        assert patched_sheets.stored_tasks()[0].is_done is True

    def test_patch_edits_fields(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.patch(
            "/tasks",
            json={"id": "a", "content": "Storyboard v2", "assignedTo": "bob@x.com"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        stored = patched_sheets.stored_tasks()[0]
        assert stored.content == "Storyboard v2"
        assert stored.assigned_to == "bob@x.com"
        assert stored.weight == 3

    def test_patch_null_fields_keep_stored_values(self, client, auth_headers, make_task, seed_tasks, patched_sheets):
        seed_tasks([make_task(id="t1", content="Cut trailer", weight=4)])

        response = client.patch(
            "/tasks",
            json={"id": "t1", "weight": None, "content": None, "notes": "v2 music"},
            headers=auth_headers,
        )

        assert response.json() == {"success": True}
        stored = patched_sheets.stored_tasks()[0]
        assert (stored.content, stored.weight, stored.notes) == ("Cut trailer", 4, "v2 music")

    def test_patch_only_null_fields_is_400(self, client, auth_headers, make_task, seed_tasks, patched_sheets):
        seed_tasks([make_task(id="t1", content="Cut trailer", weight=4)])
        before = patched_sheets.data(settings.tasks_tab)

        response = client.patch("/tasks", json={"id": "t1", "weight": None, "content": None}, headers=auth_headers)

        assert response.status_code == 400
        assert patched_sheets.data(settings.tasks_tab) == before

    def test_patch_null_priority_clears_it(self, client, auth_headers, make_task, seed_tasks, patched_sheets):
        seed_tasks([make_task(id="t1", priority="high", assigned_to="bob@x.com")])

        response = client.patch(
            "/tasks", json={"id": "t1", "priority": None, "assignedTo": None}, headers=auth_headers
        )

        assert response.json() == {"success": True}
        stored = patched_sheets.stored_tasks()[0]
        assert stored.priority is None
        assert stored.assigned_to is None

    def test_patch_unknown_id_succeeds(self, client, auth_headers, week_tasks):
        response = client.patch("/tasks", json={"id": "missing", "weight": 1}, headers=auth_headers)

        assert response.json() == {"success": True}

    def test_delete(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.delete("/tasks", params={"id": "b"}, headers=auth_headers)

        assert response.json() == {"success": True}
        assert [task.id for task in patched_sheets.stored_tasks()] == ["a", "c", "old"]

    def test_delete_unknown_id_succeeds(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.delete("/tasks", params={"id": "missing"}, headers=auth_headers)

        assert response.status_code == 200
        assert len(patched_sheets.stored_tasks()) == 4

    def test_delete_requires_id(self, client, auth_headers):
        response = client.delete("/tasks", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing ID"

    def test_reorder(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.post(
            "/tasks/reorder",
            json={"updates": [{"id": "c", "order": 0}, {"id": "a", "order": 1}]},
            headers=auth_headers,
        )

        assert response.json() == {"success": True, "failed": []}
        orders = {task.id: task.order for task in patched_sheets.stored_tasks()}
        assert (orders["c"], orders["a"]) == (0, 1)

    def test_reorder_partial_failure(self, client, auth_headers, week_tasks, patched_sheets):
        patched_sheets.fail_update_ids.add("a")

        response = client.post(
            "/tasks/reorder",
            json={"updates": [{"id": "c", "order": 0}, {"id": "a", "order": 1}]},
            headers=auth_headers,
        )

        assert response.status_code == 500
        assert response.json()["failed"] == ["a"]

    def test_clear_completed(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.post("/tasks/clear-completed", params={"week": WEEK}, headers=auth_headers)

        assert response.json() == {"succeeded": ["b"], "failed": []}
        assert [task.id for task in patched_sheets.stored_tasks()] == ["a", "c", "old"]

    def test_copy_one_task(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.post("/tasks/copy-to-next-week", json={"id": "b"}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["workWeek"] == NEXT_WEEK
        assert body["isDone"] is False
        assert body["content"] == "Shoot"
        assert len(patched_sheets.stored_tasks()) == 5

    def test_copy_unknown_task(self, client, auth_headers, week_tasks):
        response = client.post("/tasks/copy-to-next-week", json={"id": "missing"}, headers=auth_headers)

        assert response.status_code == 404

    def test_copy_all_pending(self, client, auth_headers, week_tasks, patched_sheets):
        response = client.post("/tasks/copy-to-next-week", json={"week": WEEK}, headers=auth_headers)

        assert response.json() == {"succeeded": ["a", "c"], "failed": []}
        copied = [task for task in patched_sheets.stored_tasks() if task.work_week == NEXT_WEEK]
        assert sorted(task.content for task in copied) == ["Mix", "Storyboard"]

    def test_copy_requires_id_or_week(self, client, auth_headers):
        response = client.post("/tasks/copy-to-next-week", json={}, headers=auth_headers)

        assert response.status_code == 400


@pytest.mark.unit
class TestMemberRoutes:
    """Tests for /members and /categories endpoints."""

    def test_list_members(self, client, auth_headers, sample_members):
        response = client.get("/members", headers=auth_headers)

        body = response.json()
        assert [member["id"] for member in body] == ["alice@x.com", "bob@x.com"]
        assert body[0]["avatarUrl"] == "https://img/alice.png"
        assert body[1]["maxPoints"] == 10

    def test_me_unregistered(self, client, auth_headers, patched_sheets):
        response = client.get("/members/me", headers=auth_headers)

        assert response.status_code == 404

    def test_register_from_principal_then_me(self, client, auth_headers, patched_sheets):
        response = client.post("/members", json={}, headers=auth_headers)
        assert response.json() == {"success": True}

        me = client.get("/members/me", headers=auth_headers).json()

        assert me["email"] == "alice@x.com"
        assert me["name"] == "Alice"
        assert me["avatarUrl"] == "https://img/alice.png"
        assert me["maxPoints"] == 15

    def test_register_requires_name(self, client, auth_headers, patched_sheets):
        response = client.post("/members", json={"email": "x@x.com"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Email and Name are required"

    def test_update_capacity(self, client, auth_headers, sample_members, patched_sheets):
        response = client.put("/members", json={"email": "bob@x.com", "maxPoints": 12}, headers=auth_headers)

        assert response.json() == {"success": True}
        assert patched_sheets.data(settings.members_tab)[1][4] == "12"

    def test_update_rejects_zero_capacity(self, client, auth_headers, sample_members):
        response = client.put("/members", json={"email": "bob@x.com", "maxPoints": 0}, headers=auth_headers)

        assert response.status_code == 400

    def test_categories(self, client, auth_headers, sample_categories):
        response = client.get("/categories", headers=auth_headers)

        assert response.json() == [
            {"id": "camera", "name": "Camera", "defaultPoints": 2},
            {"id": "edit", "name": "Edit", "defaultPoints": 3},
            {"id": "sound", "name": "Sound", "defaultPoints": 1},
        ]


@pytest.mark.unit
class TestReportRoutes:
    """Tests for /reports endpoints."""

    def test_week_summary(self, client, auth_headers, week_tasks):
        response = client.get("/reports/week", params={"week": WEEK}, headers=auth_headers)

        body = response.json()
        assert body["weekKey"] == WEEK
        assert (body["total"], body["completed"], body["pending"]) == (9, 2, 7)
        assert body["diffFromPrevious"] == 4
        assert body["previousCompletionRate"] == 100

    def test_capacity(self, client, auth_headers, week_tasks, sample_members):
        response = client.get("/reports/capacity", params={"week": WEEK}, headers=auth_headers)

        rows = {row["memberId"]: row for row in response.json()}
        assert rows["alice@x.com"]["currentLoad"] == 5
        assert rows["bob@x.com"]["currentLoad"] == 4
        assert rows["bob@x.com"]["capacity"] == 10
        assert rows["bob@x.com"]["status"] == "ok"

    def test_workload(self, client, auth_headers, week_tasks, sample_members):
        response = client.get("/reports/workload", params={"week": WEEK}, headers=auth_headers)

        assert [(row["name"], row["points"]) for row in response.json()] == [("Alice", 5), ("Bob", 4)]

    def test_trend(self, client, auth_headers, week_tasks):
        response = client.get("/reports/trend", params={"week": WEEK, "weeks": 2}, headers=auth_headers)

        assert response.json() == [
            {"weekKey": "2024-12-30", "total": 5, "completed": 5},
            {"weekKey": WEEK, "total": 9, "completed": 2},
        ]

    def test_trend_rejects_zero_weeks(self, client, auth_headers):
        response = client.get("/reports/trend", params={"weeks": 0}, headers=auth_headers)

        assert response.status_code == 400

    def test_categories(self, client, auth_headers, week_tasks, sample_categories):
        response = client.get("/reports/categories", params={"week": WEEK}, headers=auth_headers)

        body = response.json()
        assert body["topCategory"] == "sound"
        assert [stat["categoryId"] for stat in body["categories"]] == ["sound", "edit", "camera"]

    def test_month(self, client, auth_headers, week_tasks, sample_members, sample_categories):
        response = client.get("/reports/month", params={"month": "2025-01"}, headers=auth_headers)

        body = response.json()
        assert body["month"] == "2025-01"
        assert body["completedCount"] == 1
        assert body["totalPoints"] == 2
        assert body["members"][0]["topCategoryName"] == "Camera"

    def test_month_rejects_bad_format(self, client, auth_headers):
        response = client.get("/reports/month", params={"month": "January"}, headers=auth_headers)

        assert response.status_code == 400
        assert "YYYY-MM" in response.json()["error"]


@pytest.mark.unit
def test_health(app_client):
    response = app_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
