"""Intake exceptions."""

from __future__ import annotations


class IntakeError(Exception):
    """Base exception for intake errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class StoreError(IntakeError):
    """Raised when a submission cannot be persisted."""

    def __init__(self, kind: str, original_error: Exception | None = None):
        cause = f"{type(original_error).__name__}: {original_error}" if original_error else "unknown"
        super().__init__(f"Failed to store {kind} submission ({cause})", original_error)
        self.kind = kind


class NotificationError(IntakeError):
    """Raised when the email provider does not accept a message."""


class BootstrapError(IntakeError):
    """Raised when the database schema cannot be initialized at startup."""


class PayloadTooLargeError(IntakeError):
    """Raised when a request body or an uploaded file exceeds its ceiling."""

    def __init__(self, what: str, limit_bytes: int):
        super().__init__(f"{what} exceeds the limit of {limit_bytes} bytes")
        self.what = what
        self.limit_bytes = limit_bytes
