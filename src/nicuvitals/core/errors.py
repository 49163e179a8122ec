"""Exceptions raised by the nicuvitals core.

All errors derive from VitalsError (a ValueError) and carry the pipeline
stage that raised them, so a failed run reports which step and which input
went wrong.
"""

from __future__ import annotations


class VitalsError(ValueError):
    """Base class for all nicuvitals errors.

    Attributes:
        stage: Short name of the pipeline stage that failed (e.g. "load").
    """

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class LoadError(VitalsError):
    """Input file is missing, unreadable, or lacks required columns."""


class RangeError(VitalsError):
    """Row range is outside the table or malformed."""


class EmptyInputError(VitalsError):
    """A summary was requested over zero values."""


class ValidationError(VitalsError):
    """Arguments or inputs to a derivation step are malformed."""
