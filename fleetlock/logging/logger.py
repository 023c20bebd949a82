"""Structured logging helper.

Lines are key=value pairs, e.g.
  ts='2026-10-19T08:00:00Z' level='WARNING' logger='fleetlock' msg='lock_acquisition_failed' resource='jobs:nightly' ttl_seconds=5
"""

from __future__ import annotations
import logging
import sys
import time
from typing import Any

class KVFormatter(logging.Formatter):
    # ts carries a Z suffix, so render it in UTC
    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            base.update(extra)
        if record.exc_info:
            exc = record.exc_info[1]
            base["exc"] = f"{type(exc).__name__}: {exc}"
        return " ".join([f"{k}={repr(v)}" for k, v in base.items()])

def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """One stderr handler per logger name; repeated calls return the same logger."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level.upper())
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(KVFormatter())
    logger.addHandler(h)
    logger.propagate = False
    return logger

def log(logger: logging.Logger, message: str, **fields: Any) -> None:
    logger.info(message, extra={"extra": fields})

def warn(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit a WARNING whose message and `event` field are both the event name."""
    logger.warning(event, extra={"extra": {"event": event, **fields}})
