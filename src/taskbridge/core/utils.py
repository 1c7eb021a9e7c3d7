"""Utility functions for Taskbridge."""

import logging
import os
import sys
import uuid
from logging.handlers import RotatingFileHandler

LOG_LEVEL_ENV_VAR = "TASKBRIDGE_LOG_LEVEL"
LOGS_DIR_ENV_VAR = "TASKBRIDGE_LOGS_DIR"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def make_run_id() -> str:
    """Generate a short 8-character UUID for workflow run tracking."""
    return uuid.uuid4().hex[:8]


def _get_log_level() -> int:
    """Console log level from TASKBRIDGE_LOG_LEVEL.

    Accepts DEBUG, INFO, WARNING or ERROR in any case; anything else means INFO.
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").strip().upper()
    if name not in _LOG_LEVELS:
        return logging.INFO
    return getattr(logging, name)


def _run_log_path(run_id: str) -> str:
    base = os.environ.get(LOGS_DIR_ENV_VAR) or os.path.join(os.getcwd(), ".taskbridge", "logs")
    run_dir = os.path.join(base, run_id)
    os.makedirs(run_dir, mode=0o755, exist_ok=True)
    return os.path.join(run_dir, "execution.log")


def _file_handler(path: str, rotating: bool, max_bytes: int, backup_count: int) -> logging.Handler:
    handler: logging.Handler
    if rotating:
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    else:
        handler = logging.FileHandler(path)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger(
    run_id: str,
    detached_mode: bool = False,
    use_rotating: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the ``taskbridge`` logger for one run.

    Every record goes to ``<logs dir>/<run_id>/execution.log`` at DEBUG. Unless
    detached, records at TASKBRIDGE_LOG_LEVEL are also echoed to stderr so
    that stdout carries only the rendered report. Module loggers
    (``taskbridge.core...``) propagate into this logger.

    Args:
        run_id: Run identifier used as the log directory name
        detached_mode: Skip the console handler
        use_rotating: Rotate the log file at ``max_bytes``
        max_bytes: Rotation threshold
        backup_count: Rotated files to keep

    Returns:
        The configured ``taskbridge`` logger
    """
    log_file = _run_log_path(run_id)

    logger = logging.getLogger("taskbridge")
    logger.setLevel(logging.DEBUG)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(_file_handler(log_file, use_rotating, max_bytes, backup_count))

    if not detached_mode:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(_get_log_level())
        console.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console)

    logger.debug("Logging run %s to %s (detached=%s)", run_id, log_file, detached_mode)
    return logger
