"""Exception hierarchy shared across the FriendForce client."""
from __future__ import annotations


class FriendForceError(Exception):
    """Base error for FriendForce client operations."""


class ApiError(FriendForceError):
    """Raised when the remote API is unreachable or answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class FormValidationError(FriendForceError):
    """Raised when a form fails client-side checks before any network call."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DialogStateError(FriendForceError):
    """Base error for illegal dialog transitions."""


class SubmissionInProgressError(DialogStateError):
    """Raised when a dialog is submitted again before the first submission settled."""


class DialogClosedError(DialogStateError):
    """Raised when a closed dialog is edited or submitted."""
