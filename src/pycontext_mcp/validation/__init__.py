"""Input validation utilities."""

from .inputs import validate_package_input, validate_path_input, validate_tool_input
from .paths import ValidationError, is_path_allowed, validate_path

__all__ = [
    "ValidationError",
    "is_path_allowed",
    "validate_package_input",
    "validate_path",
    "validate_path_input",
    "validate_tool_input",
]
