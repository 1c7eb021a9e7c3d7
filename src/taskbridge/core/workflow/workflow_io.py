"""Shared logging helpers for workflow steps."""

import logging

logger = logging.getLogger(__name__)


def log_step_start(step_name: str) -> None:
    """Log the start of a workflow step.

    Args:
        step_name: Name of the step starting
    """
    logger.info(f"\n=== {step_name} ===")


def log_step_end(step_name: str, success: bool, error: str | None = None) -> None:
    """Log the end of a workflow step.

    Args:
        step_name: Name of the step ending
        success: Whether the step succeeded
        error: Optional failure text
    """
    if success:
        logger.info(f"{step_name} completed successfully")
    elif error:
        logger.error(f"{step_name} failed: {error}")
    else:
        logger.error(f"{step_name} failed")


def log_step_skipped(step_name: str) -> None:
    """Log an optional step that was not scheduled."""
    logger.debug("%s skipped: gating parameters not supplied", step_name)
