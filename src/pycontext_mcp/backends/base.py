"""Process execution interface and shared data structures."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Sequence


class BackendError(Exception):
    """Exception for process execution errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        recoverable: bool = False,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize backend error.

        Args:
            error_code: One of: not_found, timeout, execution_error,
                        validation_error, disabled
            message: Human-readable error description
            recoverable: Whether the operation can be retried
            details: Optional additional context
        """
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Convert to MCP-compatible error response."""
        return {
            "status": "error",
            "error_code": self.error_code,
            "message": self.message,
        }


@dataclass(frozen=True)
class ProcessResult:
    """Captured output of a finished one-shot process."""

    stdout: str
    stderr: str
    return_code: int

    @property
    def ok(self) -> bool:
        return self.return_code == 0

    @property
    def combined_output(self) -> str:
        """stdout followed by stderr, trailing whitespace stripped.

        Python 2 and some launchers print the version banner on stderr, so
        version parsing reads both streams.
        """
        parts = [p for p in (self.stdout, self.stderr) if p]
        return "\n".join(parts).rstrip()


class ProcessRunner(Protocol):
    """Protocol for the one-shot process execution boundary.

    Implementations run a command to completion and return its output.
    They raise BackendError with error_code "not_found" when the executable
    cannot be launched, "timeout" when the time bound is exceeded, and
    "execution_error" for any other launch failure. A non-zero exit is not
    an error at this level; it is reported through ProcessResult.return_code.
    """

    def run(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | None = None,
    ) -> ProcessResult:
        ...
