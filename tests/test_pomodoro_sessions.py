from datetime import date

from diary.service.clock import utc_today


def _todo(client, headers, title="Focus work"):
    response = client.post("/api/todos", json={"title": title, "estimated_pomodoros": 3}, headers=headers)
    return response.get_json()


def _session(client, headers, **payload):
    return client.post("/api/pomodoro-sessions", json=payload, headers=headers)


def test_defaults(client, alice):
    response = _session(client, alice)
    assert response.status_code == 201
    session = response.get_json()
    assert session["type"] == "work"
    assert session["duration_minutes"] == 25
    assert session["task_id"] is None


def test_work_session_counts_against_todo(client, alice):
    todo = _todo(client, alice)
    for expected in (1, 2):
        response = _session(client, alice, type="work", duration_minutes=25, task_id=todo["id"])
        assert response.status_code == 201
        assert response.get_json()["task_id"] == todo["id"]
        todos = client.get("/api/todos", headers=alice).get_json()["todos"]
        assert todos[0]["completed_pomodoros"] == expected


def test_break_never_links(client, alice):
    todo = _todo(client, alice)
    session = _session(client, alice, type="short_break", duration_minutes=5, task_id=todo["id"]).get_json()
    assert session["task_id"] is None
    todos = client.get("/api/todos", headers=alice).get_json()["todos"]
    assert todos[0]["completed_pomodoros"] == 0


def test_deleted_todo_still_records_session(client, alice):
    todo = _todo(client, alice)
    client.delete(f"/api/todos/{todo['id']}", headers=alice)

    response = _session(client, alice, type="work", task_id=todo["id"])
    assert response.status_code == 201
    sessions = client.get("/api/pomodoro-sessions", headers=alice).get_json()["sessions"]
    assert len(sessions) == 1


def test_foreign_todo_is_not_touched(client, alice, bob):
    todo = _todo(client, alice)
    assert _session(client, bob, type="work", task_id=todo["id"]).status_code == 201
    todos = client.get("/api/todos", headers=alice).get_json()["todos"]
    assert todos[0]["completed_pomodoros"] == 0


def test_manual_override_then_increment(client, alice):
    todo = _todo(client, alice)
    client.put(f"/api/todos/{todo['id']}", json={"completed_pomodoros": 5}, headers=alice)
    _session(client, alice, type="work", task_id=todo["id"])
    todos = client.get("/api/todos", headers=alice).get_json()["todos"]
    assert todos[0]["completed_pomodoros"] == 6


def test_validation(client, alice):
    assert _session(client, alice, type="nap").status_code == 400
    assert _session(client, alice, duration_minutes=0).status_code == 400


def test_sessions_newest_first(client, alice):
    first = _session(client, alice).get_json()
    second = _session(client, alice, type="short_break", duration_minutes=5).get_json()
    sessions = client.get("/api/pomodoro-sessions", headers=alice).get_json()["sessions"]
    assert [session["id"] for session in sessions] == [second["id"], first["id"]]


def test_stats(client, alice, bob):
    _session(client, alice)
    _session(client, alice)
    _session(client, alice, type="long_break", duration_minutes=15)
    _session(client, bob)

    stats = client.get("/api/pomodoro-sessions/stats", headers=alice).get_json()
    assert stats == {"completed_today": 2, "total": 3}


def test_stats_count_only_today(app):
    service = app.extensions["diary"]["pomodoro_service"]
    with app.app_context():
        service.record_session("carol", {"type": "work"})
        assert service.session_stats("carol")["completed_today"] == 1
        tomorrow = date.fromordinal(utc_today().toordinal() + 1)
        assert service.session_stats("carol", today=tomorrow) == {"completed_today": 0, "total": 1}
