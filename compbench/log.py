"""Centralized logging configuration — stdlib only.

Console output goes to stderr so ``run_report.py --no-write`` can pipe the
markdown report from stdout. A daily file under ``logs/`` (or
``COMPBENCH_LOG_DIR``) keeps DEBUG detail unless ``COMPBENCH_NO_LOG_FILE`` is set.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_QUIET_LOGGERS = ("streamlit", "watchdog", "urllib3")
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _log_dir() -> Path:
    override = os.environ.get("COMPBENCH_LOG_DIR", "").strip()
    return Path(override) if override else _DEFAULT_LOG_DIR


def _file_handler(formatter: logging.Formatter) -> logging.Handler | None:
    if os.environ.get("COMPBENCH_NO_LOG_FILE"):
        return None
    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(
            log_dir / f"compbench_{datetime.now().strftime('%Y-%m-%d')}.log",
            encoding="utf-8",
        )
    except OSError as exc:
        sys.stderr.write(f"compbench: file logging disabled ({exc})\n")
        return None
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    return fh


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    fh = _file_handler(formatter)
    if fh is not None:
        root.addHandler(fh)
