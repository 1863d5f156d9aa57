# File: api_pool/engine.py
"""api_pool.engine: concurrent fan-out of GET requests with a join-all barrier.

One :class:`aiohttp.ClientSession` is created per :meth:`FetchEngine.fetch_all`
call and closed before the call returns. Every endpoint ends up with exactly
one outcome; a failing endpoint never affects the others.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from api_pool.config import DEFAULT_TIMEOUT, PoolConfig
from api_pool.decoder import decode
from api_pool.errors import TransportInitError
from api_pool.models import (
    Endpoint,
    FetchOutcome,
    HttpError,
    RunResult,
    Success,
    TransportError,
    ValidationError,
)
from api_pool.validator import is_valid

__all__ = ["FetchEngine", "sanitize_url"]

# RFC 3986 reserved characters plus "%" so existing escapes survive
_SAFE_CHARS = "!#$%&'()*+,/:;=?@[]~"


def sanitize_url(url: str) -> str:
    """Percent-encodes unsafe characters in path, query and fragment. Never rejects."""
    parts = urlsplit(url.strip())
    return urlunsplit(
        (
            parts.scheme,
            parts.netloc,
            quote(parts.path, safe=_SAFE_CHARS),
            quote(parts.query, safe=_SAFE_CHARS),
            quote(parts.fragment, safe=_SAFE_CHARS),
        )
    )


class FetchEngine:
    """Dispatches one request per endpoint and classifies each response."""

    def __init__(
        self,
        logger: logging.Logger,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_concurrency: Optional[int] = None,
        follow_redirects: bool = False,
        strict_validation: bool = True,
        user_agent: Optional[str] = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.logger = logger
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self.follow_redirects = follow_redirects
        self.strict_validation = strict_validation
        self.user_agent = user_agent

    @classmethod
    def from_config(cls, config: PoolConfig, logger: logging.Logger) -> FetchEngine:
        return cls(
            logger,
            timeout=config.timeout,
            max_concurrency=config.max_concurrency,
            follow_redirects=config.follow_redirects,
            strict_validation=config.strict_validation,
            user_agent=config.user_agent,
        )

    def fetch_all(self, endpoints: Iterable[Endpoint], timeout: Optional[float] = None) -> RunResult:
        """Blocking wrapper: runs :meth:`fetch_all_async` in a fresh event loop."""
        return asyncio.run(self.fetch_all_async(endpoints, timeout))

    async def fetch_all_async(
        self, endpoints: Iterable[Endpoint], timeout: Optional[float] = None
    ) -> RunResult:
        """Fetch every endpoint concurrently and wait for all of them.

        Duplicate endpoints collapse to a single request. Raises
        :class:`TransportInitError` if the HTTP session cannot be created.
        """
        unique = list(dict.fromkeys(endpoints))
        if not unique:
            self.logger.debug("No endpoints registered, nothing to fetch")
            return {}

        total = timeout if timeout is not None else self.timeout
        self.logger.debug("Dispatching %d requests (timeout %.1f s)", len(unique), total)
        start = time.monotonic()

        session = await self._open_session(total)
        try:
            semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
            outcomes = await asyncio.gather(
                *(self._fetch_one(session, endpoint, semaphore) for endpoint in unique)
            )
        finally:
            await session.close()

        results: RunResult = dict(zip(unique, outcomes))
        failed = sum(1 for outcome in outcomes if outcome.is_error)
        self.logger.debug(
            "Fetched %d endpoints in %.2f s (%d failed)", len(results), time.monotonic() - start, failed
        )
        return results

    async def _open_session(self, total: float) -> ClientSession:
        headers: Dict[str, str] = {}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        connector: Optional[TCPConnector] = None
        try:
            # limit=0 disables aiohttp's own cap; the semaphore applies ours
            connector = TCPConnector(limit=self.max_concurrency or 0)
            return ClientSession(
                connector=connector,
                timeout=ClientTimeout(total=total),
                headers=headers,
                raise_for_status=False,
            )
        except Exception as exc:
            if connector is not None:
                await connector.close()
            self.logger.error("Failed to initialize HTTP transport: %s", exc)
            raise TransportInitError(f"Could not create HTTP session: {exc}") from exc

    async def _fetch_one(
        self,
        session: ClientSession,
        endpoint: Endpoint,
        semaphore: Optional[asyncio.Semaphore],
    ) -> FetchOutcome:
        try:
            url = sanitize_url(endpoint)
            if semaphore is None:
                status, body = await self._request(session, url)
            else:
                async with semaphore:
                    status, body = await self._request(session, url)
        except asyncio.TimeoutError:
            return self._transport_failure(endpoint, "timeout")
        except (ClientError, ValueError, OSError) as exc:
            return self._transport_failure(endpoint, str(exc) or type(exc).__name__)
        return self._classify(endpoint, status, body)

    async def _request(self, session: ClientSession, url: str) -> Tuple[int, bytes]:
        async with session.get(url, allow_redirects=self.follow_redirects) as resp:
            if resp.status != 200:
                return resp.status, b""
            return resp.status, await resp.read()

    def _transport_failure(self, endpoint: Endpoint, message: str) -> TransportError:
        self.logger.error("Error fetching data from %s: %s", endpoint, message)
        return TransportError(message)

    def _classify(self, endpoint: Endpoint, status: int, body: bytes) -> FetchOutcome:
        if status != 200:
            self.logger.error("Error fetching data from %s: HTTP status code %d", endpoint, status)
            return HttpError(status)
        if not is_valid(body, strict=self.strict_validation):
            self.logger.error("Invalid response from %s", endpoint)
            return ValidationError()
        decoded = decode(body)
        if decoded.fallback:
            self.logger.warning(
                "Failed to decode JSON response from %s, returning raw response", endpoint
            )
        self.logger.info("Successfully fetched data from %s", endpoint)
        return Success(decoded)
