"""
Discovery context logger.

Provides logging interface for the discovery context with automatic [discover] prefix.
All discovery modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from compass.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[discover]"


def setup_discovery_logger(log_dir: Path, phase: str = "discover") -> Path:
    """
    Setup logger for stage exploration sessions.

    Args:
        log_dir: Directory for this session's log file
        phase: Phase name for provenance (e.g. "questions", "objections")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="discover",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


def _log_info(message: str) -> None:
    """Log info message with [discover] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [discover] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [discover] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [discover] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [discover] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_stage_augmented(stage_id: str, categories: list, objection_count: int) -> None:
    """Log the overlay applied to a stage."""
    if not categories and not objection_count:
        _log_debug(f"Stage '{stage_id}' shown with its baseline only")
        return
    _log_debug(
        f"Stage '{stage_id}' augmented: categories={categories}, "
        f"objections=+{objection_count}"
    )
