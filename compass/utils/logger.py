"""
Shared loguru setup for Tier 1 (detailed) session logs.

Each script session gets one log file per context plus a console echo. The file
opens with a provenance header recording how the session was launched and which
content sources it read, so a log can be matched to the catalog it describes.
Context-specific wrappers live in contexts/{context}/logger.py; library modules
only emit records and never add sinks.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from compass import __version__

load_dotenv()

# Environment variables naming the content a session reads or writes
CONTENT_SOURCE_VARS = {
    "Catalog": "CONTENT_CATALOG_PATH",
    "Stages": "STAGES_PATH",
    "Selections": "SELECTIONS_PATH",
    "Events": "GUIDE_EVENTS_FILE",
}

PACKAGED = "(packaged default)"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def content_sources() -> Dict[str, str]:
    """Content locations in effect for this process, as configured in the environment."""
    return {label: os.getenv(var) or PACKAGED for label, var in CONTENT_SOURCE_VARS.items()}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    level_colors: Optional[dict] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output to <log_dir>/<context_name>.log and the console.

    Args:
        context_name: Context identifier (e.g., "catalog", "targeting", "selections")
        log_dir: Directory for this session's log file
        extra_provenance: Extra header lines, e.g. {"Phase": "import"}
        level_colors: Console color overrides (e.g., {"INFO": "<cyan>"})
        console_level: Minimum level echoed to the console

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance({"Context": context_name, **(extra_provenance or {})})
    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """
    Write the session header: launch command, compass version, and content sources.

    Args:
        extra_context: Additional key-value pairs, written after the standard lines
    """
    header = {
        "Command": " ".join(sys.argv),
        "Working directory": str(Path.cwd()),
        "Python": sys.version.split()[0],
        "compass": __version__,
    }
    header.update(content_sources())
    header.update(extra_context or {})

    logger.debug("=" * 80)
    for key, value in header.items():
        logger.debug(f"{key}: {value}")
    logger.debug("=" * 80)
