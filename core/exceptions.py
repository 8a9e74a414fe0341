from __future__ import annotations
from typing import Optional


class StoreError(Exception):
    """A store call was rejected, returned an error payload, or never reached the server."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class EmptyResultWarning(UserWarning):
    """The store answered fine but the table has no rows."""


class ValidationError(ValueError):
    pass
