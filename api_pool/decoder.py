# File: api_pool/decoder.py
"""api_pool.decoder: turns a response body into a :class:`DecodedValue`."""
from __future__ import annotations

import json

from api_pool.models import DecodedValue

__all__ = ["decode"]


def decode(raw: bytes) -> DecodedValue:
    """Parse *raw* as JSON; fall back to the original payload instead of raising.

    The raw fallback holds the text when *raw* is valid UTF-8 and the untouched
    bytes otherwise. The caller checks :attr:`DecodedValue.fallback` and logs
    the warning.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return DecodedValue.raw(raw)
    try:
        return DecodedValue.structured(json.loads(text))
    except json.JSONDecodeError:
        return DecodedValue.raw(text)
