"""Interpreter probe tool implementations.

This module provides the get_python_version, list_packages and check_package
MCP tools. Each resolves the interpreter for a directory first and then runs
it as a one-shot subprocess.
"""

import asyncio
import time
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..backends.base import BackendError
from ..backends.process import SubprocessRunner
from ..config import Config, get_config
from ..context.project import ProjectInfo, detect_project
from ..context.version import VersionProbe
from ..logging_config import get_logger, new_request_id
from ..metrics import get_metrics_collector
from ..validation import (
    ValidationError,
    validate_package_input,
    validate_path,
    validate_path_input,
)

logger = get_logger("tools.python_info")

T = TypeVar("T")


def _validate(path: str, config: Config) -> Path:
    validated_path = validate_path_input(path)
    return validate_path(validated_path, allowed_paths=config.allowed_paths)


async def _probe(
    validated_path: Path,
    config: Config,
    operation: str,
    probe: Callable[[VersionProbe, Path | None, Path], T],
) -> tuple[ProjectInfo, T]:
    """
    Resolve the interpreter for a directory and run one probe against it.

    Both steps run in a worker thread, and the interpreter is started in the
    project root so imports see the project's own modules. Metrics are recorded under the
    project root whether the probe succeeds or not.

    Raises:
        BackendError: If the probe times out
    """
    start_time = time.time()
    success = False
    workspace_root = validated_path
    try:
        info = await detect_project(validated_path, config.resolution_config())
        workspace_root = info.root
        version_probe = VersionProbe(SubprocessRunner(config))
        result = await asyncio.to_thread(probe, version_probe, info.python_path, info.root)
        success = True
        return info, result
    finally:
        duration_ms = (time.time() - start_time) * 1000
        await get_metrics_collector().record(
            workspace_root=workspace_root,
            operation=operation,
            duration_ms=duration_ms,
            success=success,
        )


def _error_response(e: Exception, action: str) -> dict[str, Any]:
    if isinstance(e, BackendError):
        logger.error(f"Backend error: {e.error_code} - {e.message}")
        return e.to_error_response()
    logger.error(f"Unexpected error during {action}: {e}", exc_info=True)
    return {
        "status": "error",
        "error_code": "execution_error",
        "message": f"Unexpected error during {action}: {e}",
    }


async def get_python_version(path: str) -> dict[str, Any]:
    """
    Report the version of the interpreter that applies to a directory.

    Args:
        path: Absolute path to a project directory

    Returns:
        Success:
            {
                "status": "success",
                "python_path": "/path/to/project/.venv/bin/python",
                "version": "3.11.4"
            }

        version and python_path are null when no interpreter was found or
        its output had no MAJOR.MINOR.PATCH version.

        Error:
            {
                "status": "error",
                "error_code": "validation_error" | "timeout" | "execution_error",
                "message": "Human-readable error message"
            }
    """
    new_request_id()
    logger.info(f"get_python_version called with path: {path}")

    config = get_config()
    try:
        validated_path = _validate(path, config)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    try:
        info, version = await _probe(
            validated_path,
            config,
            "version",
            lambda probe, python, root: probe.get_version(python, cwd=root),
        )
    except Exception as e:
        return _error_response(e, "version probe")

    return {
        "status": "success",
        "python_path": str(info.python_path) if info.python_path else None,
        "version": version,
    }


async def list_packages(path: str) -> dict[str, Any]:
    """
    List the packages installed for the interpreter of a directory.

    Args:
        path: Absolute path to a project directory

    Returns:
        Success:
            {
                "status": "success",
                "python_path": "/usr/bin/python3",
                "packages": ["requests", "flask"],
                "count": 2
            }

        packages is empty when pip is unavailable or fails.

        Error:
            {"status": "error", "error_code": ..., "message": ...}
    """
    new_request_id()
    logger.info(f"list_packages called with path: {path}")

    config = get_config()
    try:
        validated_path = _validate(path, config)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    try:
        info, packages = await _probe(
            validated_path,
            config,
            "packages",
            lambda probe, python, root: probe.list_installed_packages(python, cwd=root),
        )
    except Exception as e:
        return _error_response(e, "package listing")

    return {
        "status": "success",
        "python_path": str(info.python_path) if info.python_path else None,
        "packages": packages,
        "count": len(packages),
    }


async def check_package(path: str, package: str) -> dict[str, Any]:
    """
    Check whether a module can be imported by the interpreter of a directory.

    Args:
        path: Absolute path to a project directory
        package: Module name to import (e.g., "requests")

    Returns:
        Success:
            {
                "status": "success",
                "python_path": "/usr/bin/python3",
                "package": "requests",
                "installed": true
            }

        Error:
            {"status": "error", "error_code": ..., "message": ...}
    """
    new_request_id()
    logger.info(f"check_package called: path={path}, package={package}")

    config = get_config()
    try:
        validated_path = _validate(path, config)
        package = validate_package_input(package)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    try:
        info, installed = await _probe(
            validated_path,
            config,
            "packages",
            lambda probe, python, root: probe.is_package_installed(
                python, package, cwd=root
            ),
        )
    except Exception as e:
        return _error_response(e, "package check")

    return {
        "status": "success",
        "python_path": str(info.python_path) if info.python_path else None,
        "package": package,
        "installed": installed,
    }
