"""Custom exceptions for the discovery context."""

from pathlib import Path
from typing import Optional


class InvalidStageStructureError(ValueError):
    """
    Exception raised when a stage baseline doesn't match the expected shape.

    Raised at load time for stages without a title, question categories that are not
    lists, or objections missing a challenge or a response.

    Attributes:
        message: Error description
        stage_id: Stage with the problem, if known
        source_path: File the stages were loaded from, if any
    """

    def __init__(
        self,
        message: str,
        stage_id: Optional[str] = None,
        source_path: Optional[Path] = None,
    ):
        self.message = message
        self.stage_id = stage_id
        self.source_path = source_path

        parts = [message]
        if stage_id:
            parts.append(f"Stage: {stage_id}")
        if source_path:
            parts.append(f"Source: {source_path}")

        super().__init__("\n".join(parts))


class StageNotFoundError(KeyError):
    """Exception raised when a stage id is not in the library."""

    pass
