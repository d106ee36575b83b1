"""Project path validation and workspace restriction.

Every tool that takes a project path resolves it here first. The result is
what the resolution engine classifies and, for the interpreter probes, the
directory the interpreter is started in, so the workspace restriction is
applied to the fully resolved path.
"""

from pathlib import Path


class ValidationError(Exception):
    """Raised when a tool parameter is rejected before any work is done."""

    def __init__(self, field: str, message: str) -> None:
        """
        Args:
            field: Tool parameter that failed validation (e.g., "path")
            message: Description of what went wrong
        """
        super().__init__(message)
        self.field = field
        self.message = message

    def to_error_response(self) -> dict[str, str]:
        """Convert to the error variant of a tool response."""
        return {
            "status": "error",
            "error_code": "validation_error",
            "message": f"{self.field}: {self.message}",
        }


def validate_path(
    path: str | Path,
    *,
    allowed_paths: list[Path] | None = None,
) -> Path:
    """Resolve a project directory (or a file inside one) for classification.

    Relative paths are taken against the server's working directory, which
    is rarely what a client means, so clients should send absolute paths.

    Args:
        path: Project directory or file
        allowed_paths: Workspace roots the path must lie under. None allows
            any existing path.

    Returns:
        Absolute path with symlinks resolved

    Raises:
        ValidationError: If the path cannot be resolved, does not exist, or
            lies outside every allowed workspace root
    """
    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise ValidationError("path", f"Failed to resolve path: {e}") from e

    if not resolved.exists():
        raise ValidationError("path", f"Path does not exist: {resolved}")

    # A symlink inside a workspace that points outside it is rejected here
    if allowed_paths is not None and not is_path_allowed(resolved, allowed_paths):
        roots = ", ".join(str(root) for root in allowed_paths)
        raise ValidationError(
            "path",
            f"Path not in allowed workspace: {resolved}. Allowed paths: {roots}",
        )

    return resolved


def is_path_allowed(path: Path, allowed_paths: list[Path]) -> bool:
    """Check whether path is one of the workspace roots or lies beneath one.

    Both sides are resolved, so a root given through a symlink still matches.
    """
    path = path.resolve()
    return any(path.is_relative_to(root.resolve()) for root in allowed_paths)
