# === FILE: api_pool/config.py ===
"""
Loading and validation of the APIPool configuration.
The schema is described and checked with Pydantic.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


__all__ = ["PoolConfig", "load_config", "DEFAULT_TIMEOUT"]

DEFAULT_TIMEOUT = 10.0


class PoolConfig(BaseModel):
    """Settings for one APIPool instance."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-request timeout (seconds).")
    log_file: Path = Field(Path("api_pool.log"), description="Append-only audit log.")
    max_concurrency: Optional[int] = Field(
        None, ge=1, description="Cap on in-flight requests; None means one per endpoint."
    )
    follow_redirects: bool = Field(False, description="Follow 3xx instead of reporting them.")
    strict_validation: bool = Field(True, description="Require 200 bodies to be JSON.")
    user_agent: Optional[str] = Field(None, min_length=1, description="User-Agent header.")
    endpoints: List[str] = Field(default_factory=list, description="Endpoints added at start-up.")

    @field_validator("endpoints")
    def _strip_blank(cls, v: List[str]) -> List[str]:
        return [url.strip() for url in v if url and url.strip()]


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> PoolConfig:
    """
    Reads YAML or JSON and returns a validated PoolConfig.
    Without a path, uses configs/default.yaml when present, otherwise defaults.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return PoolConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return PoolConfig(**data)
