# api_pool/__init__.py
"""
APIPool package initializer.
Defines package version and exposes the public API.
"""
__version__ = "0.1.0"

from api_pool.config import PoolConfig, load_config
from api_pool.engine import FetchEngine, sanitize_url
from api_pool.errors import APIPoolError, InvalidUrlError, TransportInitError
from api_pool.models import (
    DecodedValue,
    FetchOutcome,
    HttpError,
    RunResult,
    Success,
    TransportError,
    ValidationError,
)
from api_pool.pool import APIPool

__all__ = [
    "__version__",
    "APIPool",
    "FetchEngine",
    "PoolConfig",
    "load_config",
    "sanitize_url",
    "APIPoolError",
    "InvalidUrlError",
    "TransportInitError",
    "DecodedValue",
    "FetchOutcome",
    "Success",
    "TransportError",
    "HttpError",
    "ValidationError",
    "RunResult",
]
