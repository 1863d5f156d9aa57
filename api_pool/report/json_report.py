# api_pool/report/json_report.py

"""
JSON report for APIPool.

Serializes a run result (endpoint -> outcome) to a file.
"""
import json
from pathlib import Path
from typing import Any, Dict, Mapping

from api_pool.models import Endpoint, FetchOutcome, HttpError, Success, TransportError


def outcome_to_dict(outcome: FetchOutcome) -> Dict[str, Any]:
    """Plain-dict form of one outcome, as written to the report."""
    if isinstance(outcome, Success):
        return {
            "status": "ok",
            "kind": outcome.payload.kind,
            "payload": outcome.payload.text,
        }
    data: Dict[str, Any] = {
        "status": "error",
        "type": type(outcome).__name__,
        "reason": outcome.reason,
    }
    if isinstance(outcome, HttpError):
        data["status_code"] = outcome.status_code
    elif isinstance(outcome, TransportError):
        data["message"] = outcome.message
    return data


def render_json(results: Mapping[Endpoint, FetchOutcome], output_path: Path | str) -> Path:
    """
    Saves the run result as JSON at the given path.

    :param results: mapping endpoint -> outcome, as returned by APIPool.run()
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from api_pool.report.json_report import render_json
    report_path = render_json(pool.run(), 'reports/run.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {endpoint: outcome_to_dict(outcome) for endpoint, outcome in results.items()}

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
