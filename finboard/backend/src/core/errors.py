"""Failure types shared by the row stores and the dashboard accessors."""

from __future__ import annotations


class StoreError(RuntimeError):
    """Raised by a row store when a query cannot be completed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DataFetchError(RuntimeError):
    """Caller-facing failure carrying only a fixed, per-operation message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


__all__ = ["DataFetchError", "StoreError"]
