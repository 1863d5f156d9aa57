# File: api_pool/validator.py
"""api_pool.validator: decides whether a 200-response body is acceptable."""
from __future__ import annotations

import json

__all__ = ["is_valid"]


def is_valid(raw: bytes, *, strict: bool = True) -> bool:
    """Return False for an empty body; in strict mode also require UTF-8 JSON.

    With ``strict=False`` any non-empty body passes and the decoder decides
    whether it is structured or raw.
    """
    if not raw:
        return False
    if not strict:
        return True
    try:
        json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return False
    return True
