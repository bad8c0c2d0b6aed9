# This project was developed with assistance from AI tools.
"""Domain error taxonomy.

Services raise these; ``main.py`` maps them onto HTTP responses using each
class's ``status_code``. ``extra`` carries structured context that is
returned to the caller (e.g. requested vs. saved ids on a failed
verification).
"""

from typing import Any

from fastapi import status


class LendingError(Exception):
    """Base class for errors that map directly onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra


class Forbidden(LendingError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(LendingError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInput(LendingError):
    status_code = status.HTTP_400_BAD_REQUEST


class VerificationFailed(LendingError):
    """A write was accepted but the re-read record does not match it."""

    status_code = status.HTTP_409_CONFLICT
