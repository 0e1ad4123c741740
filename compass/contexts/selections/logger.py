"""
Selections context logger.

Provides logging interface for the selections context with automatic [select] prefix.
All selections modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from compass.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[select]"


def setup_selections_logger(log_dir: Path, phase: str = "select") -> Path:
    """
    Setup logger for selection management sessions.

    Args:
        log_dir: Directory for this session's log file
        phase: Phase name for provenance (e.g. "list", "toggle", "clear")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="select",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


def _log_info(message: str) -> None:
    """Log info message with [select] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [select] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [select] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [select] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [select] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_selection_change(family: str, storage_key: str, entry_id: str, selected: bool) -> None:
    """Log a single toggle."""
    action = "Selected" if selected else "Deselected"
    _log_info(f"{action} {family}/{entry_id} under '{storage_key}'")


def log_storage_degraded(family: str, error: Exception) -> None:
    """Log the switch to in-memory storage after a backend failure."""
    _log_warning(
        f"Durable storage unavailable for {family} ({type(error).__name__}: {error}); "
        "keeping selections in memory for this session"
    )
