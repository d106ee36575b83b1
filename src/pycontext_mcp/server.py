"""FastMCP server for pycontext-mcp.

NOTE: Do NOT initialize logging here at import time.
Logging is initialized in __main__.py to avoid import side effects.

Tools:
- resolve_project: Project markers, virtual environment and interpreter
- get_venv_info: Virtual environment description
- get_python_version: Interpreter version
- list_packages: Installed packages of the interpreter
- check_package: Import probe for one module
- check_tool: Formatter / linter / test framework availability
- health_check: Server health and configuration
"""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP


def create_mcp_server() -> FastMCP:
    """Create and initialize the MCP server instance.

    Logging is only set up here when nothing configured it yet (e.g., when
    the module is imported by tests rather than run through __main__).

    Returns:
        FastMCP server instance
    """
    root_logger = logging.getLogger()
    if not root_logger.hasHandlers():
        from .config import get_config
        from .logging_config import setup_logging

        config = get_config()
        setup_logging(config)

    return FastMCP("pycontext-mcp")


mcp = create_mcp_server()


@mcp.tool()
async def resolve_project(
    path: str,
    python_command: str | None = None,
) -> dict[str, Any]:
    """
    Resolve the Python execution context of a directory.

    Use this tool before running Python tooling in a project to learn whether
    it is a Python project, which virtual environment applies, and which
    interpreter to invoke.

    Args:
        path: Absolute path to the project directory (or a file inside it)
        python_command: Preferred interpreter command (e.g., "python3.12").
                        Defaults to the server configuration.

    Returns:
        Dictionary with status field indicating success or error.
        Success includes root, is_python_project, marker flags, venv_path,
        python_path, package_manager and venv_active.
        Error includes error_code and message.
    """
    # Lazy import to avoid circular dependencies and import-time side effects
    from .tools.project_info import resolve_project as resolve_project_impl

    return await resolve_project_impl(path, python_command)


@mcp.tool()
async def get_venv_info(path: str) -> dict[str, Any]:
    """
    Describe the virtual environment that applies to a directory.

    Args:
        path: Absolute path to the project directory

    Returns:
        Dictionary with status field. Success includes venv (path,
        python_path, name, kind, active) or null when there is none.
    """
    from .tools.project_info import get_venv_info as get_venv_info_impl

    return await get_venv_info_impl(path)


@mcp.tool()
async def get_python_version(path: str) -> dict[str, Any]:
    """
    Get the version of the Python interpreter used for a directory.

    Args:
        path: Absolute path to the project directory

    Returns:
        Dictionary with status field. Success includes python_path and
        version (e.g., "3.11.4"); both may be null.
    """
    from .tools.python_info import get_python_version as get_python_version_impl

    return await get_python_version_impl(path)


@mcp.tool()
async def list_packages(path: str) -> dict[str, Any]:
    """
    List the packages installed for the interpreter of a directory.

    Args:
        path: Absolute path to the project directory

    Returns:
        Dictionary with status field. Success includes python_path,
        packages (names in pip's order) and count.
    """
    from .tools.python_info import list_packages as list_packages_impl

    return await list_packages_impl(path)


@mcp.tool()
async def check_package(path: str, package: str) -> dict[str, Any]:
    """
    Check whether a module can be imported in a directory's interpreter.

    Args:
        path: Absolute path to the project directory
        package: Module name (e.g., "requests", "yaml")

    Returns:
        Dictionary with status field. Success includes installed (bool).
    """
    from .tools.python_info import check_package as check_package_impl

    return await check_package_impl(path, package)


@mcp.tool()
async def check_tool(kind: str, name: str) -> dict[str, Any]:
    """
    Check whether a development tool is available on the search path.

    Args:
        kind: "formatter", "linter" or "test_framework"
        name: Tool name. Formatters: black, isort, autopep8.
              Linters: flake8, pylint, mypy.
              Test frameworks: pytest, unittest, nose.

    Returns:
        Dictionary with status field. Success includes available (bool);
        unrecognised names are reported as unavailable.
    """
    from .tools.tool_availability import check_tool as check_tool_impl

    return await check_tool_impl(kind, name)


@mcp.tool()
async def health_check() -> dict[str, Any]:
    """
    Check server health and verify a Python interpreter is available.

    Returns:
        Dictionary with status field.
        Success includes python_version, tools, config and uptime_seconds.
        Error includes error_code and message.
    """
    from .config import get_config
    from .tools.health_check import health_check as health_check_impl

    config = get_config()
    if not config.enable_health_check:
        return {
            "status": "error",
            "error_code": "disabled",
            "message": "Health check tool is disabled. Set PYCONTEXT_MCP_ENABLE_HEALTH_CHECK=true to enable.",
        }

    return await health_check_impl()
