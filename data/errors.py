"""
Failures surfaced by the data layer and the correlation engine.
"""

from typing import Optional


class DataFetchFailure(Exception):
    """
    Raised by the retrying cache once every attempt has failed.

    Attributes:
        attempts: Number of times the operation was invoked
        last_error: The exception raised by the final attempt
    """

    def __init__(self, message: str, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error

    @property
    def retries(self) -> int:
        """Attempts beyond the first one."""
        return max(self.attempts - 1, 0)


class MatrixBuildFailure(Exception):
    """Raised when the correlation matrix cannot be produced at all."""

    def __init__(self, message: str = "Failed to generate correlation heatmap. Please try again."):
        super().__init__(message)
