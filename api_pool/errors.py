# File: api_pool/errors.py
"""api_pool.errors: exception hierarchy for APIPool.

Per-endpoint failures are not exceptions; they are recorded as outcome values
(see :mod:`api_pool.models`). Only the errors below ever cross a module boundary.
"""
from __future__ import annotations

__all__ = ["APIPoolError", "InvalidUrlError", "TransportInitError"]


class APIPoolError(Exception):
    """Base class for all APIPool errors."""


class InvalidUrlError(APIPoolError, ValueError):
    """Endpoint URL is syntactically malformed (missing scheme or host)."""

    def __init__(self, url: str, reason: str = "missing scheme or host") -> None:
        super().__init__(f"Invalid URL provided: {url} ({reason})")
        self.url = url
        self.reason = reason


class TransportInitError(APIPoolError, RuntimeError):
    """The HTTP session could not be created, so nothing was dispatched."""
