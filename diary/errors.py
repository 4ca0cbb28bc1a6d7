class DiaryError(Exception):
    """Base for errors that are reported back to the caller."""

    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self):
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DiaryError):
    """Malformed or missing input. Never retried."""

    status_code = 400


class NotFoundError(DiaryError):
    """Record is absent or belongs to another owner."""

    status_code = 404


class UpstreamFailure(DiaryError):
    """A dependent external call (identity provider, remote API) failed."""

    status_code = 502
