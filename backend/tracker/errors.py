"""Error kinds raised by the service and HTTP layers.

Every kind carries the HTTP status it should be reported with. The
central handlers in `tracker.handlers` translate them into the
`{"error": <kind>, "message": <text>}` response body.
"""


class TrackerError(Exception):
    """Base class for all application errors."""
    status_code = 418

    def __init__(self, message: str = None):
        self.message = message or 'An error occurred'
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_response(self) -> dict:
        return {'error': self.name, 'message': self.message}

    def __repr__(self) -> str:
        return f"{self.name}(message={self.message!r})"


class ConflictError(TrackerError):
    """A resource with the same unique value already exists."""
    status_code = 409


class NotFoundError(TrackerError):
    status_code = 404


class InvalidError(TrackerError):
    """Input failed validation, or login credentials did not match."""
    status_code = 400


class UnauthorizedError(TrackerError):
    status_code = 401


class ServerError(TrackerError):
    status_code = 500
