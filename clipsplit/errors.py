"""Exceptions raised while planning and executing a split."""

from typing import Any


class SplitError(RuntimeError):
    """Base exception for split failures."""

    code = "split.error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details


class ValidationError(SplitError, ValueError):
    """Raised when a split request is malformed or points at missing paths."""

    code = "split.validation"


class ComputationError(SplitError):
    """Raised when no partitions could be planned for a request."""

    code = "split.no_partitions"


class ProbeError(SplitError):
    """Raised when the duration of the input cannot be determined."""

    code = "split.probe"


class ExecutionError(SplitError):
    """Raised when ffmpeg fails to produce an extraction or concatenation."""

    code = "split.execution"

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "SplitError",
    "ValidationError",
    "ComputationError",
    "ProbeError",
    "ExecutionError",
]
