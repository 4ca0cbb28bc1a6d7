import logging

from diary.errors import NotFoundError
from diary.service.clock import utc_day_start_iso, utc_now_iso, utc_today
from diary.service.schemas import (
    CreatePomodoroSessionRequest,
    CreateTodoRequest,
    ListQuery,
    TodoQuery,
    UpdateTodoRequest,
    validate,
)
from diary.service.view_state import TodoViewState, count_todos, filter_todos, list_names

logger = logging.getLogger(__name__)


def _todo_record(row):
    return {**dict(row), "is_completed": bool(row["is_completed"])}


class TodoService:
    def __init__(self, repository):
        self.repository = repository

    def list_todos(self, user_id, args=None):
        query = validate(TodoQuery, args)
        rows = self.repository.fetch_todos(
            user_id,
            completed=query.completed,
            priority=query.priority,
            limit=query.limit,
        )
        return [_todo_record(row) for row in rows]

    def todo_view(self, user_id, args=None, today=None):
        state = TodoViewState.from_args(args or {})
        today = today or utc_today()
        todos = [_todo_record(row) for row in self.repository.fetch_todos(user_id)]
        return {
            "filter": state.active_filter,
            "list": state.active_list,
            "search": state.search,
            "todos": filter_todos(todos, state, today),
            "counts": count_todos(todos, today),
            "lists": list_names(todos),
        }

    def create_todo(self, user_id, payload):
        request = validate(CreateTodoRequest, payload)
        row = self.repository.create_todo(user_id, request.fields(), utc_now_iso())
        logger.info("todo created", extra={"user_id": user_id, "todo_id": row["id"]})
        return _todo_record(row)

    def update_todo(self, user_id, todo_id, payload):
        patch = validate(UpdateTodoRequest, payload)
        changes = patch.changes()
        row = self.repository.update_todo(user_id, todo_id, changes, utc_now_iso())
        if row is None:
            raise NotFoundError("Todo not found")
        if "completed_pomodoros" in changes:
            logger.info(
                "todo pomodoro count overridden",
                extra={"user_id": user_id, "todo_id": todo_id, "value": changes["completed_pomodoros"]},
            )
        return _todo_record(row)

    def delete_todo(self, user_id, todo_id):
        if not self.repository.delete_todo(user_id, todo_id):
            raise NotFoundError("Todo not found")
        logger.info("todo deleted", extra={"user_id": user_id, "todo_id": todo_id})


class TaskLinker:
    """Counts completed work sessions against the todo they were linked to."""

    def __init__(self, repository):
        self.repository = repository

    def on_work_session_completed(self, user_id, todo_id):
        linked = self.repository.increment_todo_pomodoros(user_id, todo_id, utc_now_iso())
        if not linked:
            # The todo was deleted (or never belonged to this user); the session
            # itself is already stored, so there is nothing to undo.
            logger.info(
                "linked todo missing, skipping pomodoro count",
                extra={"user_id": user_id, "todo_id": todo_id},
            )
        return linked


class PomodoroService:
    def __init__(self, repository, linker):
        self.repository = repository
        self.linker = linker

    def list_sessions(self, user_id, args=None):
        query = validate(ListQuery, args)
        return [
            dict(row)
            for row in self.repository.fetch_pomodoro_sessions(user_id, limit=query.limit)
        ]

    def record_session(self, user_id, payload):
        request = validate(CreatePomodoroSessionRequest, payload)
        task_id = request.task_id if request.type == "work" else None
        row = self.repository.create_pomodoro_session(
            user_id, request.type, request.duration_minutes, task_id, utc_now_iso()
        )
        logger.info(
            "pomodoro session recorded",
            extra={"user_id": user_id, "session_id": row["id"], "type": request.type, "task_id": task_id},
        )
        if task_id is not None:
            self.linker.on_work_session_completed(user_id, task_id)
        return dict(row)

    def session_stats(self, user_id, today=None):
        since = utc_day_start_iso(today or utc_today())
        return {
            "completed_today": self.repository.count_pomodoro_sessions(
                user_id, session_type="work", since=since
            ),
            "total": self.repository.count_pomodoro_sessions(user_id),
        }
