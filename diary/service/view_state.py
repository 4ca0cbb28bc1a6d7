"""Read-side view state for the timeline and todo pages.

View state is an immutable value parsed from query arguments; filtering and
ordering are pure functions of (records, state), so nothing here touches
storage or request globals.
"""

from dataclasses import dataclass, replace
from typing import Optional

from diary.errors import ValidationError

TIMELINE_FILTERS = ("all", "morning", "evening")
TODO_FILTERS = ("all", "today", "important", "planned", "completed")
DEFAULT_LISTS = ("My Tasks", "Work", "Personal")
PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass(frozen=True)
class TimelineViewState:
    filter_type: str = "all"
    search: str = ""

    @classmethod
    def from_args(cls, args):
        filter_type = (args.get("type") or "all").strip()
        if filter_type not in TIMELINE_FILTERS:
            raise ValidationError(
                "invalid request",
                details=[{"field": "type", "message": f"must be one of {', '.join(TIMELINE_FILTERS)}"}],
            )
        return cls(filter_type=filter_type, search=(args.get("search") or "").strip())


@dataclass(frozen=True)
class TodoViewState:
    active_filter: str = "all"
    active_list: Optional[str] = None
    search: str = ""

    @classmethod
    def from_args(cls, args):
        active_filter = (args.get("filter") or "all").strip()
        if active_filter not in TODO_FILTERS:
            raise ValidationError(
                "invalid request",
                details=[{"field": "filter", "message": f"must be one of {', '.join(TODO_FILTERS)}"}],
            )
        return cls(
            active_filter=active_filter,
            active_list=(args.get("list") or "").strip() or None,
            search=(args.get("search") or "").strip(),
        )

    def with_filter(self, active_filter):
        return replace(self, active_filter=active_filter)


def filter_answers(answers, state):
    if state.filter_type == "all":
        return list(answers)
    return [answer for answer in answers if answer["type"] == state.filter_type]


def build_timeline(answers, practices, state):
    """Merge answers (type-filtered) and practices into one newest-first feed."""
    visible_answers = filter_answers(answers, state)
    entries = [
        {"kind": "answer", "timestamp": answer["created_at"], "record": answer}
        for answer in visible_answers
    ]
    entries.extend(
        {"kind": "practice", "timestamp": practice["completed_at"], "record": practice}
        for practice in practices
    )
    entries.sort(key=lambda entry: entry["timestamp"], reverse=True)
    return {
        "filter": state.filter_type,
        "search": state.search,
        "entries": entries,
        "answers": visible_answers,
        "practices": list(practices),
        "is_empty": not entries,
    }


def _is_due_on(todo, today):
    today_str = today.isoformat()
    reminder = todo.get("reminder_date") or ""
    return todo.get("due_date") == today_str or reminder.startswith(today_str)


def _is_planned(todo):
    return bool(todo.get("due_date") or todo.get("reminder_date"))


def _matches_search(todo, search):
    if not search:
        return True
    needle = search.casefold()
    for field in ("title", "description", "notes"):
        value = todo.get(field)
        if value and needle in value.casefold():
            return True
    return False


def sort_todos(todos):
    """Incomplete first, then high/medium/low, then newest first."""
    ordered = sorted(todos, key=lambda todo: (todo["created_at"], todo["id"]), reverse=True)
    return sorted(
        ordered,
        key=lambda todo: (bool(todo["is_completed"]), PRIORITY_ORDER.get(todo["priority"], 3)),
    )


def filter_todos(todos, state, today):
    visible = [
        todo
        for todo in todos
        if (state.active_list is None or todo.get("list_name") == state.active_list)
        and _matches_search(todo, state.search)
    ]
    if state.active_filter == "today":
        visible = [todo for todo in visible if _is_due_on(todo, today)]
    elif state.active_filter == "important":
        visible = [todo for todo in visible if todo["priority"] == "high"]
    elif state.active_filter == "planned":
        visible = [todo for todo in visible if _is_planned(todo)]
    elif state.active_filter == "completed":
        visible = [todo for todo in visible if todo["is_completed"]]
    else:
        visible = [todo for todo in visible if not todo["is_completed"]]
    return sort_todos(visible)


def count_todos(todos, today):
    open_todos = [todo for todo in todos if not todo["is_completed"]]
    return {
        "all": len(open_todos),
        "today": sum(1 for todo in open_todos if _is_due_on(todo, today)),
        "important": sum(1 for todo in open_todos if todo["priority"] == "high"),
        "planned": sum(1 for todo in open_todos if _is_planned(todo)),
        "completed": len(todos) - len(open_todos),
    }


def list_names(todos):
    names = list(DEFAULT_LISTS)
    for todo in todos:
        name = todo.get("list_name")
        if name and name not in names:
            names.append(name)
    return names
