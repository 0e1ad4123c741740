"""Whole-file replacement writes (temp file in the target directory, then move)."""

import os
import shutil
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, content: str, suffix: str = ".tmp") -> None:
    """
    Replace path with content, never leaving a partially written file behind.

    The temp file is created next to the target so the final move stays on one
    filesystem.

    Raises:
        OSError: If the directory is not writable or the move fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(suffix=suffix, dir=path.parent, text=True)
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)

        # Only overwrite original if write succeeded
        shutil.move(temp_path, path)
    except Exception:
        # Clean up temp file if write failed
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
