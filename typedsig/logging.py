"""
typedsig.logging
----------------

Structured logging with:
- JSON or concise text formats
- Safe JSON serialization (bytes → 0x-hex, Paths → str)
- Simple setup through stdlib `logging`; nothing is configured at import time

Usage
-----
    from typedsig import logging as tlog

    tlog.configure(json=False, level="DEBUG")  # once, by the application
    log = tlog.get_logger(__name__)
    log.debug("type hash computed", extra={"type_name": "Mail"})

Library modules only log at DEBUG and never log key material.
"""

from __future__ import annotations

import datetime as _dt
import io
import json as _json
import logging
import os
import sys
import traceback
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER = "typedsig"

# LogRecord attributes that are not user-supplied fields.
_RESERVED = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    )
)

_LEVEL_TO_INT = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if isinstance(v, Path):
        return str(v)
    if is_dataclass(v) and not isinstance(v, type):
        return asdict(v)
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RESERVED
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return _json.dumps(payload, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | DEBUG | typedsig.encoding.type_hash | type_name=Mail | type hash computed
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{_utcnow_iso()} | {record.levelname:<5} | {record.name}"
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        if extras:
            line += f" | {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return _LEVEL_TO_INT[level.strip().upper()]
    except KeyError as e:
        raise ValueError(f"unknown log level: {level!r}") from e


def _env_json_override() -> Optional[bool]:
    v = os.environ.get("TYPEDSIG_LOG_FORMAT")
    if not v:
        return None
    return v.strip().lower() == "json"


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "WARNING",
    stream: Optional[io.TextIOBase] = None,
) -> logging.Logger:
    """
    Configure the package logger (``typedsig``), replacing handlers it owns.

    Parameters
    ----------
    json : bool | None
        If None, determined by env TYPEDSIG_LOG_FORMAT=(json|text); text otherwise.
    level : str | int
        Minimum log level.
    stream : TextIO
        Stream for the console handler (default: the current sys.stderr).
    """
    chosen_json = json if json is not None else bool(_env_json_override())
    lvl = _coerce_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(lvl)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(lvl)
    console.setFormatter(JSONFormatter() if chosen_json else TextFormatter())
    logger.addHandler(console)
    logger.propagate = False
    return logger


def configure_from_config(cfg: Any) -> logging.Logger:
    """Configure logging from a :class:`typedsig.config.Config`."""
    return configure(json=cfg.log_format == "json", level=cfg.log_level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or ROOT_LOGGER)


# Library default: stay silent unless the application configures handlers.
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
]
