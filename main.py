import logging

from flask import Flask, request

from diary.auth.oauth import init_oauth
from diary.auth.routes import register_auth_routes
from diary.auth_client import init_auth
from diary.config import configure_logging, load_config
from diary.presentation.errors import register_error_handlers
from diary.presentation.routes import register_routes
from diary.repository import build_repository
from diary.service.journal_service import JournalService
from diary.service.todo_service import PomodoroService, TaskLinker, TodoService

logger = logging.getLogger(__name__)


def _init_cors(app):
    allow_origin = app.config.get("CORS_ALLOW_ORIGIN")
    if not allow_origin:
        return

    @app.before_request
    def answer_preflight():
        if request.method == "OPTIONS":
            return app.response_class(status=200)
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = allow_origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response


def create_app(config_overrides=None):
    config = load_config(config_overrides)
    configure_logging(config.get("LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.config.update(config)

    repository = build_repository(config)
    journal_service = JournalService(repository)
    todo_service = TodoService(repository)
    pomodoro_service = PomodoroService(repository, TaskLinker(repository))

    app.extensions["diary"] = {
        "repository": repository,
        "journal_service": journal_service,
        "todo_service": todo_service,
        "pomodoro_service": pomodoro_service,
    }
    app.teardown_appcontext(repository.close_db)

    _init_cors(app)
    init_auth(app)
    init_oauth(app)
    register_auth_routes(app)
    register_error_handlers(app)
    register_routes(app, journal_service, todo_service, pomodoro_service)

    with app.app_context():
        repository.init_db()
    logger.info("app ready", extra={"backend": type(repository).__name__})
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
