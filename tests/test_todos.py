from datetime import date

from diary.service.clock import utc_today


def _create(client, headers, **fields):
    payload = {"title": "Write weekly review"}
    payload.update(fields)
    response = client.post("/api/todos", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_create_defaults(client, alice):
    todo = _create(client, alice)
    assert todo["is_completed"] is False
    assert todo["priority"] == "medium"
    assert todo["list_name"] == "My Tasks"
    assert todo["estimated_pomodoros"] == 1
    assert todo["completed_pomodoros"] == 0
    assert todo["description"] is None


def test_title_required(client, alice):
    assert client.post("/api/todos", json={"title": "   "}, headers=alice).status_code == 400
    assert client.post("/api/todos", json={}, headers=alice).status_code == 400


def test_invalid_fields(client, alice):
    assert client.post(
        "/api/todos", json={"title": "x", "priority": "urgent"}, headers=alice
    ).status_code == 400
    assert client.post(
        "/api/todos", json={"title": "x", "estimated_pomodoros": 0}, headers=alice
    ).status_code == 400
    assert client.post(
        "/api/todos", json={"title": "x", "due_date": "not-a-date"}, headers=alice
    ).status_code == 400


def test_ordering(client, alice):
    low = _create(client, alice, title="low", priority="low")
    high = _create(client, alice, title="high", priority="high")
    medium = _create(client, alice, title="medium")
    done = _create(client, alice, title="done", priority="high")
    client.put(f"/api/todos/{done['id']}", json={"is_completed": True}, headers=alice)

    listed = client.get("/api/todos", headers=alice).get_json()["todos"]
    assert [todo["id"] for todo in listed] == [high["id"], medium["id"], low["id"], done["id"]]


def test_list_filters(client, alice):
    open_todo = _create(client, alice, priority="high")
    done = _create(client, alice)
    client.put(f"/api/todos/{done['id']}", json={"is_completed": True}, headers=alice)

    completed = client.get("/api/todos?completed=true", headers=alice).get_json()["todos"]
    assert [todo["id"] for todo in completed] == [done["id"]]
    assert completed[0]["is_completed"] is True

    high = client.get("/api/todos?priority=high", headers=alice).get_json()["todos"]
    assert [todo["id"] for todo in high] == [open_todo["id"]]


def test_partial_update(client, alice):
    todo = _create(client, alice, description="details", due_date="2030-01-02")
    updated = client.put(
        f"/api/todos/{todo['id']}",
        json={"priority": "high"},
        headers=alice,
    ).get_json()
    assert updated["priority"] == "high"
    assert updated["title"] == todo["title"]
    assert updated["description"] == "details"
    assert updated["due_date"] == "2030-01-02"
    assert updated["list_name"] == todo["list_name"]


def test_clear_nullable_field(client, alice):
    todo = _create(client, alice, due_date="2030-01-02")
    updated = client.put(
        f"/api/todos/{todo['id']}", json={"due_date": None}, headers=alice
    ).get_json()
    assert updated["due_date"] is None


def test_null_title_rejected(client, alice):
    todo = _create(client, alice)
    response = client.put(f"/api/todos/{todo['id']}", json={"title": None}, headers=alice)
    assert response.status_code == 400


def test_owner_isolation(client, alice, bob):
    todo = _create(client, alice)
    assert client.get("/api/todos", headers=bob).get_json()["todos"] == []
    assert client.put(
        f"/api/todos/{todo['id']}", json={"title": "mine now"}, headers=bob
    ).status_code == 404
    assert client.delete(f"/api/todos/{todo['id']}", headers=bob).status_code == 404


def test_delete_twice(client, alice):
    todo = _create(client, alice)
    assert client.delete(f"/api/todos/{todo['id']}", headers=alice).get_json() == {"success": True}
    response = client.delete(f"/api/todos/{todo['id']}", headers=alice)
    assert response.status_code == 404
    assert response.get_json() == {"error": "Todo not found"}


def test_todo_view(client, alice):
    today = utc_today().isoformat()
    due_today = _create(client, alice, title="Pay rent", due_date=today, list_name="Personal")
    important = _create(client, alice, title="Ship release", priority="high", list_name="Work")
    planned = _create(client, alice, title="Dentist", due_date="2099-05-01")
    done = _create(client, alice, title="Old chore")
    client.put(f"/api/todos/{done['id']}", json={"is_completed": True}, headers=alice)

    view = client.get("/api/todos/view", headers=alice).get_json()
    assert view["filter"] == "all"
    assert {todo["id"] for todo in view["todos"]} == {due_today["id"], important["id"], planned["id"]}
    assert view["counts"] == {"all": 3, "today": 1, "important": 1, "planned": 2, "completed": 1}
    assert view["lists"][:3] == ["My Tasks", "Work", "Personal"]

    today_view = client.get("/api/todos/view?filter=today", headers=alice).get_json()
    assert [todo["id"] for todo in today_view["todos"]] == [due_today["id"]]

    work = client.get("/api/todos/view?list=Work", headers=alice).get_json()
    assert [todo["id"] for todo in work["todos"]] == [important["id"]]

    search = client.get("/api/todos/view?filter=completed&search=CHORE", headers=alice).get_json()
    assert [todo["id"] for todo in search["todos"]] == [done["id"]]

    assert client.get("/api/todos/view?filter=someday", headers=alice).status_code == 400


def test_custom_list_names_are_listed(client, alice):
    _create(client, alice, list_name="Garden")
    view = client.get("/api/todos/view", headers=alice).get_json()
    assert view["lists"] == ["My Tasks", "Work", "Personal", "Garden"]


def test_due_date_is_stored_as_iso_date(client, alice):
    todo = _create(client, alice, due_date=date(2031, 3, 4).isoformat())
    assert todo["due_date"] == "2031-03-04"
