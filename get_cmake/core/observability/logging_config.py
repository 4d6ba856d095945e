"""
Logging configuration — central setup for the CLI.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Console level precedence:
    --debug / --verbose / --quiet  >  GET_CMAKE_LOG_LEVEL  >  WARNING

WARNING is the quiet default a CI log wants: deprecation notices and
failures only.  ``--verbose`` adds one line per pipeline step.

Optional file output via GET_CMAKE_LOG_FILE / GET_CMAKE_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "GET_CMAKE_LOG_LEVEL"
LOG_FILE_ENV = "GET_CMAKE_LOG_FILE"
LOG_FILE_LEVEL_ENV = "GET_CMAKE_LOG_FILE_LEVEL"

# (format, datefmt) by the most verbose level each applies to
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
]
_FMT_PLAIN = "%(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def console_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if env is None else env
    return env.get(LOG_LEVEL_ENV, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_FMT_PLAIN)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Replaces any handlers from an earlier call, so the CLI (and tests
    invoking it repeatedly) never double-log.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_lvl = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_lvl)
    console.setFormatter(_console_formatter(console_lvl))

    handlers: list[logging.Handler] = [console]
    root_lvl = console_lvl

    if log_file:
        file_lvl = _parse_level(log_file_level) if log_file_level else console_lvl
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_lvl)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        handlers.append(fh)
        root_lvl = min(root_lvl, file_lvl)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(root_lvl)

    # a closed stderr (CliRunner, piped CI output) must not crash a run
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else logging.WARNING
    return numeric if isinstance(numeric, int) else logging.WARNING
