"""Errors raised by the tracker's stores and services."""


class TrackerError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Client supplied malformed, missing or out-of-range input."""

    status_code = 400


class NotFoundError(TrackerError):
    """Referenced record does not exist."""

    status_code = 404
