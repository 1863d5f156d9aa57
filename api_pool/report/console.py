# File: api_pool/report/console.py
"""api_pool.report.console: prints one line per endpoint of a run."""

from __future__ import annotations

import json
import logging
from typing import Callable, Mapping

import click

from api_pool.models import Endpoint, FetchOutcome, Success


class ResultReporter:
    """Presentation only: never mutates the results it is given."""

    def __init__(self, logger: logging.Logger, echo: Callable[[str], None] = click.echo) -> None:
        self.logger = logger
        self.echo = echo

    def report(self, results: Mapping[Endpoint, FetchOutcome]) -> None:
        for endpoint, outcome in results.items():
            if isinstance(outcome, Success):
                pretty = json.dumps(outcome.payload.as_json(), indent=4, ensure_ascii=False)
                self.echo(f"Response for {endpoint}: {pretty}")
            else:
                line = f"Error for {endpoint}: {outcome.reason}"
                self.logger.error(line)
                self.echo(line)
