# File: tests/conftest.py
import re
from pathlib import Path
from typing import List

import pytest

from api_pool.config import PoolConfig
from api_pool.logger import configure

LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\]\[(DEBUG|INFO|WARNING|ERROR)\] (.*)$")


def read_log(path: Path) -> List[str]:
    """Return the non-empty lines of an audit log."""
    if not path.exists():
        return []
    return [line for line in path.read_text(encoding="utf-8").splitlines() if line]


def log_messages(path: Path, level: str) -> List[str]:
    """Messages logged at *level*, without the timestamp prefix."""
    out = []
    for line in read_log(path):
        match = LINE_RE.match(line)
        if match and match.group(1) == level:
            out.append(match.group(2))
    return out


@pytest.fixture()
def log_file(tmp_path) -> Path:
    return tmp_path / "audit.log"


@pytest.fixture()
def audit_logger(request, log_file):
    """
    A logger with its own file sink, so tests never share handlers.
    """
    logger = configure(log_file=log_file, name=f"APIPool.test.{request.node.name}")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture()
def pool_config(tmp_path) -> PoolConfig:
    """
    Return a basic valid PoolConfig with a short timeout.
    """
    return PoolConfig(timeout=2.0, log_file=tmp_path / "pool.log")
