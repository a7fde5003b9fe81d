"""Error types raised by the service layer and mapped to HTTP statuses by the API."""

from typing import List, Optional


class JobBoardError(Exception):
    """Base class for expected, request-terminating failures."""

    status_code = 500


class ValidationError(JobBoardError):
    """Payload failed the required-field checks."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(JobBoardError):
    """Natural key does not resolve to a stored record."""

    status_code = 404


class ConflictError(JobBoardError):
    """Natural key is already taken."""

    status_code = 409
