"""Error types raised across the InsightBoard client.

Chart building and session state never raise; these errors come from the
gateway boundary, local upload checks and table payload parsing.
"""

from typing import Optional

DEFAULT_ERROR_MESSAGE = "An error occurred"


class InsightBoardError(Exception):
    """Base error carrying a user-facing message."""

    def __init__(self, message: str, cause: str = "", suggestion: str = ""):
        self.message = message or DEFAULT_ERROR_MESSAGE
        self.cause = cause
        self.suggestion = suggestion
        super().__init__(self.message)


class ValidationError(InsightBoardError):
    """Bad file type or size, or a missing selection."""


class AuthError(InsightBoardError):
    """Missing, expired or malformed credential."""


class NetworkError(InsightBoardError):
    """A gateway request failed or returned an unsuccessful envelope."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        cause: str = "",
        suggestion: str = "",
    ):
        self.status = status
        super().__init__(message, cause=cause, suggestion=suggestion)


class DataError(InsightBoardError):
    """A table payload is malformed or has no rows."""
