"""
Catalog context logger.

Provides logging interface for the catalog context with automatic [catalog] prefix.
All catalog modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from compass.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[catalog]"


def setup_catalog_logger(log_dir: Path, phase: str = "catalog") -> Path:
    """
    Setup logger for catalog maintenance sessions (validate, import, export).

    Args:
        log_dir: Directory for this session's log file
        phase: Phase name for provenance (e.g. "validate", "import")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="catalog",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


def _log_info(message: str) -> None:
    """Log info message with [catalog] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [catalog] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [catalog] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [catalog] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [catalog] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_catalog_loaded(source: str, counts: dict) -> None:
    """Log a summary of a freshly loaded catalog."""
    summary = ", ".join(f"{family}={count}" for family, count in counts.items())
    _log_info(f"Loaded catalog from {source} ({summary})")


def log_admin_edit(action: str, family: str, entry_id: str) -> None:
    """Log an admin edit (add/update/remove) against the catalog."""
    _log_info(f"Admin {action}: {family}/{entry_id}")
