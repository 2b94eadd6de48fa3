from tasktrack.infra.models import Task
from tasktrack.infra.repository import Repository

TASK = {
    "title": "Write copy",
    "description": "Landing page",
    "completed": False,
    "priority": "high",
    "dueDate": "2026-11-15T09:30:00Z",
    "projectId": 7,
}


def test_task_routes_are_not_gated(client):
    assert client.get("/api/tasks").json() == []
    r = client.post("/api/tasks", json=TASK)
    assert r.status_code == 201
    t = r.json()
    assert t["title"] == "Write copy"
    assert t["completed"] is False
    assert t["projectId"] == 7
    assert t["dueDate"].startswith("2026-11-15T09:30:00")
    assert "userId" not in t


def test_create_defaults_completed_to_false(client):
    r = client.post("/api/tasks", json={"title": "Bare"})
    assert r.status_code == 201
    t = r.json()
    assert t["completed"] is False
    assert t["projectId"] is None


def test_project_id_is_not_checked(client, count_rows):
    r = client.post("/api/tasks", json={"title": "Orphan", "projectId": 424242})
    assert r.status_code == 201
    assert count_rows(Task) == 1


def test_get_and_missing(client):
    t = client.post("/api/tasks", json=TASK).json()
    assert client.get(f"/api/tasks/{t['id']}").json()["title"] == "Write copy"

    r = client.get("/api/tasks/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Task not found"}


def test_update_is_full_replace(client):
    t = client.post("/api/tasks", json=TASK).json()
    r = client.put(f"/api/tasks/{t['id']}", json={"title": "Rewritten", "completed": True})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Rewritten"
    assert body["completed"] is True
    assert body["description"] is None
    assert body["priority"] is None
    assert body["projectId"] is None


def test_update_missing_is_404(client, count_rows):
    r = client.put("/api/tasks/55", json=TASK)
    assert r.status_code == 404
    assert r.json() == {"error": "Task not found"}
    assert count_rows(Task) == 0


def test_delete(client, count_rows):
    t = client.post("/api/tasks", json=TASK).json()
    r = client.delete(f"/api/tasks/{t['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Task deleted successfully"}
    assert client.delete(f"/api/tasks/{t['id']}").status_code == 404
    assert count_rows(Task) == 0


def test_create_without_title_is_500(client):
    r = client.post("/api/tasks", json={"description": "untitled"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create task"}


def test_store_failures_use_generic_messages(client, monkeypatch):
    t = client.post("/api/tasks", json=TASK).json()

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(Repository, "find_by_pk", boom)
    monkeypatch.setattr(Repository, "destroy", boom)

    r = client.get(f"/api/tasks/{t['id']}")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch task"}

    r = client.put(f"/api/tasks/{t['id']}", json=TASK)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to update task"}

    r = client.delete(f"/api/tasks/{t['id']}")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to delete task"}
