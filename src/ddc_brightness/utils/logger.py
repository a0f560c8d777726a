"""Logging setup: Rich console handler on stderr + optional daily-rotated file logs."""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# File log format: [TIME] [LEVEL] [COMPONENT] message
_FILE_FORMAT = "%(asctime)s [%(levelname)-8s] [%(name)-20s] %(message)s"
_FILE_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    verbose: bool = False,
    log_level: str = "WARNING",
    log_dir: Path | None = None,
) -> None:
    """Configure logging with Rich output on stderr and optional file rotation.

    Status lines are printed separately; this only covers diagnostics.

    Args:
        verbose: If True, sets log level to DEBUG.
        log_level: Default log level string (e.g. "INFO", "WARNING").
        log_dir: Directory for ``ddc-brightness.log``; None disables file logging.
    """
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_dir is not None else level)

    # Remove existing handlers to avoid duplicates on reconfigure
    root.handlers.clear()

    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=verbose,
        show_level=True,
        show_time=verbose,
    )
    rich_handler.setLevel(level)
    root.addHandler(rich_handler)

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "ddc-brightness.log"
        file_handler = TimedRotatingFileHandler(
            filename=str(log_file),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FMT))
        root.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, file=%s, verbose=%s",
        logging.getLevelName(level), log_file, verbose,
    )
