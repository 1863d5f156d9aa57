# File: api_pool/models.py
"""Data models for APIPool: endpoints, decoded payloads and fetch outcomes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Union

__all__ = (
    "Endpoint",
    "DecodedValue",
    "Success",
    "TransportError",
    "HttpError",
    "ValidationError",
    "FetchOutcome",
    "RunResult",
)

#: URL string accepted by the endpoint registry.
Endpoint = str

DecodedKind = Literal["structured", "raw"]


@dataclass(frozen=True, slots=True)
class DecodedValue:
    """Parsed JSON value, or the original payload when parsing failed."""

    kind: DecodedKind
    value: Any

    @classmethod
    def structured(cls, value: Any) -> DecodedValue:
        return cls("structured", value)

    @classmethod
    def raw(cls, payload: Union[str, bytes]) -> DecodedValue:
        return cls("raw", payload)

    @property
    def is_structured(self) -> bool:
        return self.kind == "structured"

    @property
    def fallback(self) -> bool:
        """True when decoding fell back to the raw text."""
        return self.kind == "raw"

    @property
    def text(self) -> Any:
        """Structured value, or raw payload as text (undecodable bytes replaced)."""
        if isinstance(self.value, bytes):
            return self.value.decode("utf-8", errors="replace")
        return self.value

    def as_json(self) -> Any:
        """Value suitable for ``json.dumps``; raw text is wrapped as ``{"raw": ...}``."""
        return self.text if self.is_structured else {"raw": self.text}


@dataclass(frozen=True, slots=True)
class Success:
    payload: DecodedValue

    is_error = False

    @property
    def reason(self) -> str:
        return ""


@dataclass(frozen=True, slots=True)
class TransportError:
    """Connection, DNS or timeout failure."""

    message: str

    is_error = True

    @property
    def reason(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class HttpError:
    """Response arrived with a status other than 200."""

    status_code: int

    is_error = True

    @property
    def reason(self) -> str:
        return f"HTTP status code {self.status_code}"


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Status 200, but the body was empty or malformed."""

    reason: str = "invalid response"

    is_error = True


FetchOutcome = Union[Success, TransportError, HttpError, ValidationError]

#: One outcome per distinct endpoint, in registration order.
RunResult = Dict[Endpoint, FetchOutcome]
