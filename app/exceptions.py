"""Domain errors raised by the messaging services.

Every error carries a human-readable message and the HTTP status the API layer
answers with. Only ``TransientError`` is worth retrying.
"""

from __future__ import annotations


class MessagingError(Exception):
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MessagingError):
    """Malformed input: empty or over-long content, self-addressed message."""

    status_code = 400


class NotFoundError(MessagingError):
    """Missing message, user or item reference."""

    status_code = 404


class AuthorizationError(MessagingError):
    """Actor is not a participant, or not the recipient when marking read."""

    status_code = 403


class ConflictError(MessagingError):
    status_code = 409


class TransientError(MessagingError):
    """Storage timed out or is unavailable. Safe to retry with backoff."""

    status_code = 503
    retryable = True
