"""Error taxonomy for ContentDesk.

Every failure that crosses an operation boundary is one of these.  Nothing
is retried automatically; callers surface the message and let the operator
re-trigger the action.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AuthReason(str, Enum):
    """Why an authentication step failed."""

    INVALID_CREDENTIALS = "invalid_credentials"
    NETWORK = "network"
    MISSING = "missing"
    EXPIRED = "expired"
    REJECTED = "rejected"


class ValidationReason(str, Enum):
    """Which precondition a local validation step rejected."""

    MISSING_KEY = "missing_key"
    MISSING_FIELD = "missing_field"
    INVALID_VALUE = "invalid_value"


class ContentDeskError(Exception):
    """Base class for all ContentDesk errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(ContentDeskError):
    """Missing, invalid or expired credential.  Operator must log in again."""

    _DEFAULT_MESSAGES = {
        AuthReason.INVALID_CREDENTIALS: "Invalid email or password.",
        AuthReason.NETWORK: "Network error occurred during login.",
        AuthReason.MISSING: "API key not found. Please log in again.",
        AuthReason.EXPIRED: "API key has expired. Please log in again.",
        AuthReason.REJECTED: "API key was rejected. Please log in again.",
    }

    def __init__(self, reason: AuthReason, message: str = "") -> None:
        super().__init__(message or self._DEFAULT_MESSAGES[reason])
        self.reason = reason


class ValidationError(ContentDeskError):
    """A required field or key was absent before a request was sent."""

    def __init__(self, reason: ValidationReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class ApiError(ContentDeskError):
    """A remote call failed (non-2xx response or transport failure).

    ``status_code`` is *None* for transport failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchError(ApiError):
    """A read (list/retrieve) call failed."""


class SubmitError(ApiError):
    """A generation job could not be enqueued."""
