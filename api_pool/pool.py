# File: api_pool/pool.py
"""api_pool.pool: facade that owns the endpoint registry and the last run result."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional

from api_pool.config import PoolConfig
from api_pool.engine import FetchEngine
from api_pool.errors import InvalidUrlError
from api_pool.logger import configure
from api_pool.models import Endpoint, RunResult
from api_pool.registry import EndpointRegistry
from api_pool.report import ResultReporter

__all__ = ["APIPool"]


class APIPool:
    """Entry point for library users: add endpoints, then run.

    Example::

        pool = APIPool()
        pool.add_endpoint("https://api.example.com/status")
        results = pool.run()
    """

    def __init__(
        self,
        config: Optional[PoolConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        engine: Optional[FetchEngine] = None,
        reporter: Optional[ResultReporter] = None,
    ) -> None:
        self.config = config or PoolConfig()
        if logger is None:
            # one sink per log file, so pools never steal each other's handlers
            log_path = Path(self.config.log_file).resolve()
            logger = configure(log_file=log_path, name=f"APIPool.{log_path}")
        self.logger = logger
        self.registry = EndpointRegistry(self.logger)
        self.engine = engine or FetchEngine.from_config(self.config, self.logger)
        self.reporter = reporter or ResultReporter(self.logger)
        self.results: RunResult = {}
        self._run_lock = threading.Lock()
        self.logger.info("API pool initialized")

        for url in self.config.endpoints:
            self.add_endpoint(url)

    def add_endpoint(self, url: str) -> Optional[InvalidUrlError]:
        """Registers *url*; returns the error for a malformed URL instead of raising."""
        if self._run_lock.locked():
            raise RuntimeError("Cannot add endpoints while a run is in progress")
        return self.registry.add(url)

    def get_endpoints(self) -> List[Endpoint]:
        return self.registry.list()

    def run(self) -> RunResult:
        """Fetches all endpoints, prints the report and returns a fresh result mapping."""
        if not self._run_lock.acquire(blocking=False):
            raise RuntimeError("APIPool.run() is already in progress")
        try:
            self.results = {}
            self.results = self.engine.fetch_all(self.registry.list())
        finally:
            self._run_lock.release()
        self.reporter.report(self.results)
        return self.results
