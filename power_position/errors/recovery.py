"""
Recovery strategy classifications for error handling.

These classes tell the retry policy which errors may succeed on a later
attempt.
"""


class RecoverableError(Exception):
    """Mixin for errors that can be recovered from automatically."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = True
