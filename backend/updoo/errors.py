"""Errors raised by listing lifecycle operations.

All of them describe a caller mistake except :class:`ConflictError`, which
means a concurrent write won the race and the caller may re-fetch and retry.
"""

from __future__ import annotations


class LifecycleError(Exception):
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LifecycleError):
    pass


class InvalidState(LifecycleError):
    pass


class Unauthorized(LifecycleError):
    pass


class NotFound(LifecycleError):
    pass


class ConflictError(LifecycleError):
    retryable = True
