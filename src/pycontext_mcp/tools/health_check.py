"""Health check tool implementation.

This module provides the health_check MCP tool, which verifies server health
and that a system Python interpreter can be found and run.
"""

import asyncio
import time
from pathlib import Path
from typing import Any

from ..backends.base import BackendError
from ..backends.process import run_process_async
from ..config import get_config
from ..context.interpreter import InterpreterResolver
from ..context.tools import ToolProbe
from ..context.version import parse_version
from ..logging_config import get_logger
from ..metrics import get_metrics_collector

logger = get_logger("tools.health_check")

# Track server start time (lazy initialization)
_server_start_time: float | None = None

# Oldest interpreter the server reports as fully supported
MINIMUM_PYTHON_VERSION = "3.8.0"

# Seconds allowed for `python --version`
VERSION_TIMEOUT = 5.0


def _parse_version(version_str: str | None) -> tuple[int, int, int] | None:
    """Parse '3.11.4' into (3, 11, 4); None if there is no dotted triple."""
    version = parse_version(version_str)
    if version is None:
        return None
    major, minor, patch = (int(part) for part in version.split("."))
    return (major, minor, patch)


def _is_version_compatible(version: str | None) -> bool:
    """Check if an interpreter version is >= MINIMUM_PYTHON_VERSION."""
    version_tuple = _parse_version(version)
    min_version_tuple = _parse_version(MINIMUM_PYTHON_VERSION)

    if not version_tuple or not min_version_tuple:
        return False

    return version_tuple >= min_version_tuple


async def _get_interpreter_version(
    python_path: Path,
) -> tuple[str | None, str | None, str | None]:
    """Run `<python> --version`.

    Returns:
        Tuple of (version_string, error_code, error_message) where:
        - version_string is the parsed version (e.g., "3.11.4") or None
        - error_code is one of: None (success), "timeout", "not_found", "execution_error"
        - error_message is the error detail if error_code is not None
    """
    try:
        result = await run_process_async(python_path, ["--version"], timeout=VERSION_TIMEOUT)
    except BackendError as e:
        return (None, e.error_code, e.message)

    if not result.ok:
        return (None, "execution_error", result.stderr.strip() or result.stdout.strip())

    version = parse_version(result.combined_output)
    if version is None:
        return (
            None,
            "execution_error",
            f"Unrecognised version output: {result.combined_output[:200]!r}",
        )
    return (version, None, None)


async def health_check() -> dict[str, Any]:
    """
    Check server health and verify a Python interpreter is available.

    Verifies that:
    - A system interpreter resolves from the configured command chain
    - The interpreter runs and reports a version >= 3.8.0
    - Server configuration is valid

    Returns:
        Success:
            {
                "status": "healthy",
                "python_path": "/usr/bin/python3",
                "python_version": "3.11.4",
                "python_available": true,
                "tools": {"formatter": {"black": true, ...}, ...},
                "config": {...},
                "uptime_seconds": 123.45,
                "metrics": {...}
            }

        Degraded (old interpreter):
            {"status": "degraded", ..., "diagnostics": ["..."]}

        Error:
            {
                "status": "error",
                "error_code": "not_found" | "timeout" | "execution_error",
                "message": "Human-readable error message"
            }
    """
    logger.info("health_check called")

    config = get_config()

    python_path = await asyncio.to_thread(
        InterpreterResolver().resolve_system_interpreter, config.python_command
    )
    if python_path is None:
        logger.error("No Python interpreter found on PATH")
        return {
            "status": "error",
            "error_code": "not_found",
            "message": (
                f"No Python interpreter found (tried {config.python_command}, "
                "python3, python, py). Check PATH or PYCONTEXT_MCP_PYTHON_COMMAND."
            ),
        }

    python_version, error_code, error_message = await _get_interpreter_version(python_path)
    if error_code is not None:
        logger.error(f"Interpreter check failed: {error_code} - {error_message}")
        return {
            "status": "error",
            "error_code": error_code,
            "message": f"Python interpreter check failed: {error_message}",
        }

    is_compatible = _is_version_compatible(python_version)
    health_status = "healthy" if is_compatible else "degraded"
    diagnostics: list[str] = []

    if not is_compatible:
        msg = (
            f"Python {python_version} at {python_path} is older than "
            f"{MINIMUM_PYTHON_VERSION}"
        )
        diagnostics.append(msg)
        logger.warning(msg)

    tools = await asyncio.to_thread(ToolProbe().available_tools)

    # Build config summary (sanitize sensitive data)
    allowed_paths_count = len(config.allowed_paths) if config.allowed_paths else 0
    config_summary = {
        "python_command": config.python_command,
        "enable_virtual_env": config.enable_virtual_env,
        "auto_detect_venv": config.auto_detect_venv,
        "package_manager": config.package_manager,
        "process_timeout": config.process_timeout,
        "log_level": config.log_level,
        "log_mode": config.log_mode,
        "allowed_paths_count": allowed_paths_count,
        "enable_health_check": config.enable_health_check,
    }

    global _server_start_time
    if _server_start_time is None:
        _server_start_time = time.time()
    uptime_seconds = time.time() - _server_start_time

    metrics_collector = get_metrics_collector()
    response: dict[str, Any] = {
        "status": health_status,
        "python_path": str(python_path),
        "python_version": python_version,
        "python_available": True,
        "tools": tools,
        "config": config_summary,
        "uptime_seconds": round(uptime_seconds, 2),
        "metrics": {
            "uptime_seconds": round(metrics_collector.uptime_seconds(), 2),
            "workspaces": [m.to_dict() for m in metrics_collector.get_all_metrics()],
        },
    }
    if diagnostics:
        response["diagnostics"] = diagnostics

    logger.info("Health check completed")
    return response
