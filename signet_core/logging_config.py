"""
Logging configuration for Signet.

Two output formats:
  - **human** – coloured, single-line, readable in a terminal
  - **json**  – newline-delimited JSON for log aggregators

Signing calls attach an ``operation`` (e.g. ``signethtx``) to their log
records through ``extra=``; both formatters surface it when present.

Usage:
    from signet_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="signet.log")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from signet_core.config import LoggingConfig

# Third-party loggers that are too chatty at DEBUG for an interactive tool.
_QUIET_LOGGERS = ("aiohttp.access", "aiohttp.client", "asyncio")


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        operation = getattr(record, "operation", None)
        if operation:
            log_obj["operation"] = operation
        if record.exc_info and record.exc_info[1]:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


class _HumanFormatter(logging.Formatter):
    """Coloured, concise single-line format."""

    COLOURS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, colour: bool = True):
        super().__init__()
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        colour, reset = (self.COLOURS.get(record.levelname, ""), self.RESET) if self.colour else ("", "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        operation = getattr(record, "operation", None)
        tag = f" ({operation})" if operation else ""
        line = (
            f"{colour}{ts} [{record.levelname:<7}]{reset} "
            f"{record.name}{tag}: {record.getMessage()}"
        )
        if record.exc_info and record.exc_info[1]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
    fmt : str
        ``"human"`` or ``"json"``.
    log_file : str, optional
        Also write records to this file, always as JSON.
    """
    if fmt not in ("human", "json"):
        raise ValueError(f"Unknown log format: {fmt!r} (expected 'human' or 'json')")

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        console.setFormatter(_JSONFormatter())
    else:
        console.setFormatter(_HumanFormatter(colour=sys.stderr.isatty()))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path))
        fh.setFormatter(_JSONFormatter())
        root.addHandler(fh)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def setup_logging_from_config(cfg: LoggingConfig) -> None:
    """Apply the ``[logging]`` section of a loaded SignetConfig."""
    setup_logging(level=cfg.level, fmt=cfg.format, log_file=cfg.file)
