# File: api_pool/report/__init__.py
"""api_pool.report: rendering of run results to the console and to JSON files."""

from __future__ import annotations

from api_pool.report.console import ResultReporter
from api_pool.report.json_report import outcome_to_dict, render_json

__all__ = ["ResultReporter", "render_json", "outcome_to_dict"]
