"""Logging setup: gate log, repair-loop log, optional console output."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

GATE_LOG_NAME = "continuity_gate.log"
REPAIR_LOG_NAME = "gate_repairs.log"
REPAIR_LOGGER = "workflow"  # graph nodes and callbacks log under this prefix

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ("langgraph", "httpx", "httpcore")


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        str(path), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    console_enabled: bool = True,
) -> Path:
    """Configure root logging for the gate and hook tools.

    Safe to call more than once: handlers installed by a previous call are
    replaced, not duplicated.

    Args:
        level: Level for the console and main log file.
        log_dir: Directory for log files. Defaults to ./data/logs.
        console_enabled: Also log to stderr (the CLI enables this with --verbose).

    Returns:
        The resolved log directory.
    """
    log_dir = Path(log_dir or "./data/logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(log_dir / GATE_LOG_NAME, level, formatter))

    # Repair attempts always land in their own file at DEBUG, whatever the root level
    repair_logger = logging.getLogger(REPAIR_LOGGER)
    repair_logger.handlers.clear()
    repair_logger.setLevel(logging.DEBUG)
    repair_logger.addHandler(_rotating_handler(log_dir / REPAIR_LOG_NAME, logging.DEBUG, formatter))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug("Logging initialized: level=%s, dir=%s", level, log_dir)
    return log_dir
