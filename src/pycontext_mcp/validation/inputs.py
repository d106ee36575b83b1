"""Input validation for MCP tool parameters."""

from pathlib import Path

from ..context.tools import TOOL_COMMANDS, ToolKind
from ..context.version import MODULE_NAME_PATTERN
from .paths import ValidationError, validate_path


def validate_path_input(path: str | None) -> Path:
    """Validate the path parameter shared by the project tools.

    Args:
        path: Project directory or a file inside it

    Returns:
        Normalized absolute Path object

    Raises:
        ValidationError: If path is None, empty, or does not exist

    Note:
        Does not enforce allowed_paths here - that's done at tool layer
        with config.
    """
    if path is None:
        raise ValidationError("path", "path parameter is required")

    if not path.strip():
        raise ValidationError("path", "path parameter cannot be empty")

    return validate_path(path)


def validate_tool_input(kind: str | None, name: str | None) -> tuple[ToolKind, str]:
    """Validate check_tool parameters.

    Only the shape is checked. A well-formed but unrecognised tool name is
    passed through, since "unknown tool" is a normal answer (not available).

    Returns:
        Tuple of (parsed kind, stripped name)

    Raises:
        ValidationError: If kind is not a known category or name is empty
    """
    if kind is None or not kind.strip():
        raise ValidationError("kind", "kind parameter is required")

    tool_kind = ToolKind.parse(kind)
    if tool_kind is None:
        valid = ", ".join(k.value for k in TOOL_COMMANDS)
        raise ValidationError("kind", f"kind must be one of: {valid}, got: {kind}")

    if name is None or not name.strip():
        raise ValidationError("name", "name parameter is required")

    return tool_kind, name.strip()


def validate_package_input(package: str | None) -> str:
    """Validate a module name for the import probe.

    Raises:
        ValidationError: If package is empty or not a dotted identifier
    """
    if package is None or not package.strip():
        raise ValidationError("package", "package parameter is required")

    package = package.strip()
    if not MODULE_NAME_PATTERN.fullmatch(package):
        raise ValidationError(
            "package", f"package must be a dotted module name, got: {package!r}"
        )
    return package
