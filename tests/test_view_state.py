from datetime import date

import pytest

from diary.errors import ValidationError
from diary.service.view_state import (
    TimelineViewState,
    TodoViewState,
    build_timeline,
    count_todos,
    filter_todos,
    list_names,
    sort_todos,
)

TODAY = date(2024, 5, 10)


def _todo(todo_id, **fields):
    todo = {
        "id": todo_id,
        "title": f"todo {todo_id}",
        "description": None,
        "notes": None,
        "is_completed": False,
        "priority": "medium",
        "due_date": None,
        "reminder_date": None,
        "list_name": "My Tasks",
        "created_at": f"2024-05-0{todo_id}T10:00:00.000000+00:00",
    }
    todo.update(fields)
    return todo


def test_timeline_state_defaults():
    state = TimelineViewState.from_args({})
    assert state == TimelineViewState(filter_type="all", search="")


def test_timeline_state_strips_search():
    assert TimelineViewState.from_args({"search": "  rain "}).search == "rain"


def test_timeline_state_rejects_unknown_filter():
    with pytest.raises(ValidationError):
        TimelineViewState.from_args({"type": "afternoon"})


def test_build_timeline_is_pure():
    answers = [
        {"id": 1, "type": "morning", "created_at": "2024-05-01T08:00:00.000000+00:00"},
        {"id": 2, "type": "evening", "created_at": "2024-05-01T21:00:00.000000+00:00"},
    ]
    practices = [{"id": 5, "completed_at": "2024-05-01T12:00:00.000000+00:00"}]
    state = TimelineViewState(filter_type="morning")

    view = build_timeline(answers, practices, state)

    assert [entry["record"]["id"] for entry in view["entries"]] == [5, 1]
    assert view["answers"] == [answers[0]]
    assert len(answers) == 2
    assert view["is_empty"] is False


def test_todo_state_with_filter():
    state = TodoViewState.from_args({"list": "Work"})
    switched = state.with_filter("important")
    assert switched.active_filter == "important"
    assert switched.active_list == "Work"
    assert state.active_filter == "all"


def test_sort_todos():
    todos = [
        _todo(1, priority="low"),
        _todo(2, priority="high", is_completed=True),
        _todo(3, priority="high"),
        _todo(4, priority="medium"),
        _todo(5, priority="medium"),
    ]
    assert [todo["id"] for todo in sort_todos(todos)] == [3, 5, 4, 1, 2]


def test_filter_today_matches_due_or_reminder():
    todos = [
        _todo(1, due_date="2024-05-10"),
        _todo(2, reminder_date="2024-05-10T09:00:00"),
        _todo(3, due_date="2024-05-11"),
    ]
    state = TodoViewState(active_filter="today")
    assert {todo["id"] for todo in filter_todos(todos, state, TODAY)} == {1, 2}


def test_search_covers_notes_and_description():
    todos = [
        _todo(1, notes="Call the Bank"),
        _todo(2, description="bank statement"),
        _todo(3, title="groceries"),
    ]
    state = TodoViewState(search="BANK")
    assert {todo["id"] for todo in filter_todos(todos, state, TODAY)} == {1, 2}


def test_counts():
    todos = [
        _todo(1, priority="high", due_date="2024-05-10"),
        _todo(2, reminder_date="2024-06-01T09:00:00"),
        _todo(3, is_completed=True, priority="high"),
    ]
    assert count_todos(todos, TODAY) == {
        "all": 2,
        "today": 1,
        "important": 1,
        "planned": 2,
        "completed": 1,
    }


def test_list_names_keep_defaults_first():
    todos = [_todo(1, list_name="Errands"), _todo(2, list_name="Work")]
    assert list_names(todos) == ["My Tasks", "Work", "Personal", "Errands"]
