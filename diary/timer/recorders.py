"""Where a finished Pomodoro session gets written.

Both recorders expose ``record(payload) -> dict`` and raise a ``DiaryError``
when the session could not be stored, which the timer treats as a rollback.
"""

import logging

import requests

from diary.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class ServiceRecorder:
    """Records in-process through the app's PomodoroService."""

    def __init__(self, app, user_id):
        self.app = app
        self.user_id = user_id

    def record(self, payload):
        with self.app.app_context():
            service = self.app.extensions["diary"]["pomodoro_service"]
            return service.record_session(self.user_id, payload)


class HttpRecorder:
    """Records through the HTTP API with a bearer session token."""

    def __init__(self, base_url, access_token, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.session = session or requests.Session()
        self.timeout = timeout

    def record(self, payload):
        url = f"{self.base_url}/api/pomodoro-sessions"
        try:
            response = self.session.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            logger.warning("session upload failed", extra={"url": url, "reason": str(exc)})
            raise UpstreamFailure(f"Could not record session: {exc}") from exc
