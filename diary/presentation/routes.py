import json

from flask import request

from diary.auth_client import auth_required, current_user
from diary.service.clock import utc_today


def _query_args():
    # Empty query values (``?type=``) mean "not given"
    return {key: value for key, value in request.args.items() if value != ""}


def _json_body():
    return request.get_json(silent=True) or {}


def register_routes(app, journal_service, todo_service, pomodoro_service):
    @app.route("/api/answers", methods=["GET"])
    @auth_required()
    def list_answers():
        return {"answers": journal_service.list_answers(current_user.id, _query_args())}

    @app.route("/api/answers", methods=["POST"])
    @auth_required()
    def create_answer():
        return journal_service.create_answer(current_user.id, _json_body()), 201

    @app.route("/api/answers/<int:answer_id>", methods=["PUT"])
    @auth_required()
    def update_answer(answer_id):
        return journal_service.update_answer(current_user.id, answer_id, _json_body())

    @app.route("/api/answers/<int:answer_id>", methods=["DELETE"])
    @auth_required()
    def delete_answer(answer_id):
        journal_service.delete_answer(current_user.id, answer_id)
        return {"success": True}

    @app.route("/api/questions", methods=["GET"])
    @auth_required()
    def questions():
        return {"questions": journal_service.question_prompts(_query_args().get("type"))}

    @app.route("/api/practices", methods=["GET"])
    @auth_required()
    def list_practices():
        return {"practices": journal_service.list_practices(current_user.id, _query_args())}

    @app.route("/api/practices", methods=["POST"])
    @auth_required()
    def create_practice():
        return journal_service.create_practice(current_user.id, _json_body()), 201

    @app.route("/api/practices/<int:practice_id>", methods=["DELETE"])
    @auth_required()
    def delete_practice(practice_id):
        journal_service.delete_practice(current_user.id, practice_id)
        return {"success": True}

    @app.route("/api/practices/catalog", methods=["GET"])
    @auth_required()
    def practice_catalog():
        return {"practices": journal_service.practice_catalog()}

    @app.route("/api/settings", methods=["GET"])
    @auth_required()
    def get_settings():
        return journal_service.get_settings(current_user.id)

    @app.route("/api/settings", methods=["PUT"])
    @auth_required()
    def update_settings():
        return journal_service.update_settings(current_user.id, _json_body())

    @app.route("/api/todos", methods=["GET"])
    @auth_required()
    def list_todos():
        return {"todos": todo_service.list_todos(current_user.id, _query_args())}

    @app.route("/api/todos/view", methods=["GET"])
    @auth_required()
    def todo_view():
        return todo_service.todo_view(current_user.id, _query_args())

    @app.route("/api/todos", methods=["POST"])
    @auth_required()
    def create_todo():
        return todo_service.create_todo(current_user.id, _json_body()), 201

    @app.route("/api/todos/<int:todo_id>", methods=["PUT"])
    @auth_required()
    def update_todo(todo_id):
        return todo_service.update_todo(current_user.id, todo_id, _json_body())

    @app.route("/api/todos/<int:todo_id>", methods=["DELETE"])
    @auth_required()
    def delete_todo(todo_id):
        todo_service.delete_todo(current_user.id, todo_id)
        return {"success": True}

    @app.route("/api/pomodoro-sessions", methods=["GET"])
    @auth_required()
    def list_pomodoro_sessions():
        return {"sessions": pomodoro_service.list_sessions(current_user.id, _query_args())}

    @app.route("/api/pomodoro-sessions", methods=["POST"])
    @auth_required()
    def create_pomodoro_session():
        return pomodoro_service.record_session(current_user.id, _json_body()), 201

    @app.route("/api/pomodoro-sessions/stats", methods=["GET"])
    @auth_required()
    def pomodoro_stats():
        return pomodoro_service.session_stats(current_user.id)

    @app.route("/api/timeline", methods=["GET"])
    @auth_required()
    def timeline():
        return journal_service.timeline(current_user.id, _query_args())

    @app.route("/api/timeline/export", methods=["GET"])
    @auth_required()
    def export_timeline():
        snapshot = journal_service.export_timeline(current_user.id, _query_args())
        filename = f"ai-diary-export-{utc_today().isoformat()}.json"
        return app.response_class(
            json.dumps(snapshot, indent=2),
            mimetype="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
