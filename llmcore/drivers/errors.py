from __future__ import annotations

from typing import Optional


class DriverError(Exception):
    """Base exception for driver failures."""

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.provider = provider
        self.original_error = original_error


class TransportError(DriverError):
    """Raised when the request or the chunk source fails in transit."""


__all__ = ["DriverError", "TransportError"]
