# File: api_pool/registry.py
"""api_pool.registry: ordered set of syntactically valid endpoint URLs."""
from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional
from urllib.parse import urlsplit

from api_pool.errors import InvalidUrlError
from api_pool.models import Endpoint

__all__ = ["EndpointRegistry", "is_valid_url"]

_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def is_valid_url(url: str) -> bool:
    """Checks that *url* is absolute: a scheme, a host and no whitespace."""
    if not isinstance(url, str) or not url or _FORBIDDEN_RE.search(url):
        return False
    try:
        parts = urlsplit(url)
        # .port raises on a malformed port
        parts.port
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.hostname)


class EndpointRegistry:
    """Keeps endpoints in submission order. Duplicates are allowed."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        self._endpoints: List[Endpoint] = []

    def add(self, url: str) -> Optional[InvalidUrlError]:
        """Append *url* if valid; returns the error instead of raising it."""
        if not is_valid_url(url):
            self.logger.error("Invalid URL provided: %s", url)
            return InvalidUrlError(url)
        self._endpoints.append(url)
        self.logger.info("Added endpoint: %s", url)
        return None

    def list(self) -> List[Endpoint]:
        return list(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(list(self._endpoints))
