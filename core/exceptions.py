"""Custom exceptions for the job board.

Every error raised by the service layer derives from ``JobBoardError`` and
carries the HTTP status and error code it is surfaced with.
"""

from typing import Any, Optional

from fastapi import status


class JobBoardError(Exception):
    """Base exception for all job board errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequest(JobBoardError):
    """Raised when a request is well-formed JSON but cannot be acted on."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"


class Duplicate(JobBoardError):
    """Raised when a job with the same title already exists at a company."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "DUPLICATE"


class NoMatch(JobBoardError):
    """Raised when a filtered job search returns no rows."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "NO_MATCH"


class NotFound(JobBoardError):
    """Raised when a job id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class Unauthorized(JobBoardError):
    """Raised when a caller lacks the privileges a write requires."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
