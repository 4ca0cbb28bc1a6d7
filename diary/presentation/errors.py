import logging

from diary.errors import DiaryError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(DiaryError)
    def handle_diary_error(error):
        if error.status_code >= 500:
            logger.error("request failed", extra={"error": error.message})
        return error.to_dict(), error.status_code
