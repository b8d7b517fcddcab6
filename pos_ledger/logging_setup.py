"""structlog configuration for the ledger and its terminal front end."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

import structlog

_log_file: TextIO | None = None


def _open_log_file(path: str) -> TextIO:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return log_path.open("a", encoding="utf-8")


def configure_logging(path: str | None = None) -> None:
    """Route structured JSON log lines to ``path``.

    The Textual screen owns stdout, so logs go to a debug file. Falls back to
    stderr when the file cannot be opened.
    """
    global _log_file

    target: TextIO = sys.stderr
    if path:
        try:
            if _log_file is not None:
                _log_file.close()
                _log_file = None
            _log_file = _open_log_file(path)
            target = _log_file
        except OSError as exc:
            print(f"pos-ledger: cannot open debug log {path!r}: {exc}", file=sys.stderr)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=target),
        cache_logger_on_first_use=False,
    )
