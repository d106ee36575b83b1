"""Project resolution tool implementations.

This module provides the resolve_project and get_venv_info MCP tools, which
report the Python execution context of a directory.
"""

import asyncio
import dataclasses
import time
from typing import Any

from ..config import get_config
from ..context.project import ProjectClassifier, ProjectInfo, detect_project
from ..logging_config import get_logger, new_request_id
from ..metrics import get_metrics_collector
from ..validation import ValidationError, validate_path, validate_path_input

logger = get_logger("tools.project_info")


async def resolve_project(path: str, python_command: str | None = None) -> dict[str, Any]:
    """
    Resolve the Python execution context of a directory.

    Args:
        path: Absolute path to a project directory (or a file inside it)
        python_command: Preferred interpreter command overriding configuration
            (e.g., "python3.12")

    Returns:
        Discriminated union dict with status field:

        Success:
            {
                "status": "success",
                "root": "/path/to/project",
                "is_python_project": true,
                "has_requirements": false,
                "has_pyproject": true,
                "has_setup_py": false,
                "has_venv": true,
                "venv_path": "/path/to/project/.venv",
                "python_path": "/path/to/project/.venv/bin/python",
                "package_manager": "pip",
                "markers": ["pyproject.toml"],
                "venv_active": false,
                "python_available": true,
                "should_load": true
            }

        should_load is true for a .py file or a Python project directory.

        Error:
            {
                "status": "error",
                "error_code": "validation_error" | "execution_error",
                "message": "Human-readable error message"
            }
    """
    new_request_id()
    start_time = time.time()
    success = False
    info: ProjectInfo | None = None

    logger.info(f"resolve_project called with path: {path}")

    config = get_config()
    try:
        validated_path = validate_path_input(path)
        validated_path = validate_path(validated_path, allowed_paths=config.allowed_paths)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    resolution = config.resolution_config()
    if python_command is not None:
        if not python_command.strip():
            return ValidationError(
                "python_command", "python_command cannot be empty"
            ).to_error_response()
        resolution = dataclasses.replace(resolution, python_command=python_command.strip())

    classifier = ProjectClassifier()
    try:
        info = await detect_project(validated_path, resolution)
        venv_active = await asyncio.to_thread(
            classifier.is_venv_active, info.root, resolution, info=info
        )
        success = True
        return {
            "status": "success",
            **info.to_dict(),
            "venv_active": venv_active,
            "python_available": classifier.is_python_available(
                info.root, resolution, info=info
            ),
            "should_load": classifier.should_load(validated_path, resolution, info=info),
        }
    except Exception as e:
        logger.error(f"Failed to resolve project context: {e}", exc_info=True)
        return {
            "status": "error",
            "error_code": "execution_error",
            "message": f"Failed to resolve project context: {e}",
        }
    finally:
        duration_ms = (time.time() - start_time) * 1000
        await get_metrics_collector().record(
            workspace_root=info.root if info else validated_path,
            operation="resolve",
            duration_ms=duration_ms,
            success=success,
        )


async def get_venv_info(path: str) -> dict[str, Any]:
    """
    Describe the virtual environment that applies to a directory.

    Args:
        path: Absolute path to a project directory

    Returns:
        Success with a venv:
            {
                "status": "success",
                "venv": {
                    "path": "/path/to/project/.venv",
                    "python_path": "/path/to/project/.venv/bin/python",
                    "name": ".venv",
                    "kind": "venv",
                    "active": false
                }
            }

        Success without a venv:
            {"status": "success", "venv": null}

        Error:
            {"status": "error", "error_code": ..., "message": ...}
    """
    new_request_id()
    logger.info(f"get_venv_info called with path: {path}")

    config = get_config()
    try:
        validated_path = validate_path_input(path)
        validated_path = validate_path(validated_path, allowed_paths=config.allowed_paths)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    try:
        venv = await asyncio.to_thread(
            ProjectClassifier().get_venv_info, validated_path, config.resolution_config()
        )
    except Exception as e:
        logger.error(f"Failed to inspect virtual environment: {e}", exc_info=True)
        return {
            "status": "error",
            "error_code": "execution_error",
            "message": f"Failed to inspect virtual environment: {e}",
        }

    return {"status": "success", "venv": venv.to_dict() if venv else None}
