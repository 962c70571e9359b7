"""
Logging setup for bsnap.

Called once by main.py before the menus open. Console records go to
stderr so they never interleave with the menus on stdout.

Console level, highest precedence first:
    --debug  →  DEBUG
    -v       →  INFO
    $BSNAP_LOG_LEVEL
    WARNING

$BSNAP_LOG_FILE adds a file handler, at $BSNAP_LOG_FILE_LEVEL or the
console level.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LEVEL_ENV = "BSNAP_LOG_LEVEL"
FILE_ENV = "BSNAP_LOG_FILE"
FILE_LEVEL_ENV = "BSNAP_LOG_FILE_LEVEL"

# Console formats grow with verbosity; the file always gets the full one
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("bsnap: %(levelname)s: %(message)s", None)
_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(debug: bool, verbose: bool, env_level: str | None) -> int:
    """Console level from the CLI flags and ``$BSNAP_LOG_LEVEL``."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return _parse_level(env_level)


def setup_logging(
    debug: bool = False,
    verbose: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Install the console (and optional file) handler on the root logger.

    Args:
        debug: ``--debug`` was given.
        verbose: ``-v`` was given.
        environ: Environment to read the ``BSNAP_LOG_*`` variables from
            (default ``os.environ``).

    Returns:
        The console level in effect.
    """
    env = os.environ if environ is None else environ
    level = resolve_level(debug, verbose, env.get(LEVEL_ENV))

    fmt, datefmt = _CONSOLE_FORMATS.get(level, _CONSOLE_DEFAULT)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = level

    log_file = env.get(FILE_ENV)
    if log_file:
        file_level = _parse_level(env.get(FILE_LEVEL_ENV), default=level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    return level


def _parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Level name to its numeric value; unknown or empty names give ``default``."""
    if not name:
        return default
    numeric = logging.getLevelName(name.strip().upper())
    return numeric if isinstance(numeric, int) else default
