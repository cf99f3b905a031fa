class NotificationError(Exception):
    """Base error for notification actions; carries the HTTP status to answer with."""

    status_code = 400

    def __init__(self, message, *, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotificationNotFound(NotificationError):
    status_code = 404


class UnknownNotificationSource(NotificationError):
    status_code = 404


class NotificationSourceError(NotificationError):
    """A source could not be read or written; the rest of the feed is unaffected."""
    status_code = 503
