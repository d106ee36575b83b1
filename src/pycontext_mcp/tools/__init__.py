"""MCP tool implementations."""

from .health_check import health_check
from .project_info import get_venv_info, resolve_project
from .python_info import check_package, get_python_version, list_packages
from .tool_availability import check_tool

__all__ = [
    "check_package",
    "check_tool",
    "get_python_version",
    "get_venv_info",
    "health_check",
    "list_packages",
    "resolve_project",
]
