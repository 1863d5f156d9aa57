# === FILE: api_pool/logger.py ===
"""Audit-trail logging for **APIPool**.

Highlights
----------
* Every line has the shape ``[YYYY-MM-DD HH:MM:SS][LEVEL] message``.
* The file sink is opened in append mode and never rotated or truncated.
* No level filtering: the declared :data:`LOG_LEVELS` are informational only,
  every call at every level is written.
* Components receive a logger instance explicitly::

      from api_pool.logger import configure
      log = configure(log_file="api_pool.log")
      pool = APIPool(logger=log)
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Final, Tuple

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

LOG_LEVELS: Final[Tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

_DEFAULT_FORMAT: Final[str] = "[%(asctime)s][%(levelname)s] %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
_LOGGER_NAME: Final[str] = "APIPool"


# --------------------------------------------------------------------------- #
# Helper builders                                                             #
# --------------------------------------------------------------------------- #


def _formatter(fmt: str) -> logging.Formatter:
    return logging.Formatter(fmt, datefmt=_DATE_FORMAT)


def _stdout_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(fmt))
    handler.setLevel(logging.DEBUG)
    return handler


def _file_handler(file: Path | str, fmt: str) -> logging.FileHandler:
    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(filename=str(path), mode="a", encoding="utf-8")
    handler.setFormatter(_formatter(fmt))
    handler.setLevel(logging.DEBUG)
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    log_file: str | Path | None = "api_pool.log",
    name: str = _LOGGER_NAME,
    log_format: str = _DEFAULT_FORMAT,
    echo: bool = False,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure an append-only audit logger and return it.

    Parameters
    ----------
    log_file
        Path to the log file. *None* disables the file sink.
    name
        Logger name. Distinct names give independent sinks, which is how
        tests and embedding applications avoid sharing state.
    log_format
        Format string for :class:`logging.Formatter`.
    echo
        Also write every line to stdout.
    replace_handlers
        *True* - close and remove existing handlers first.
    """
    lg = logging.getLogger(name)
    lg.setLevel(logging.DEBUG)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))
    if echo:
        lg.addHandler(_stdout_handler(log_format))
    if not lg.handlers:
        lg.addHandler(logging.NullHandler())

    lg.propagate = False
    return lg


__all__ = ["LOG_LEVELS", "configure"]
