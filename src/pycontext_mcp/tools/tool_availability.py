"""Development tool availability tool implementation."""

import asyncio
import time
from pathlib import Path
from typing import Any

from ..context.tools import ToolProbe
from ..logging_config import get_logger, new_request_id
from ..metrics import get_metrics_collector
from ..validation import ValidationError, validate_tool_input

logger = get_logger("tools.tool_availability")


async def check_tool(kind: str, name: str) -> dict[str, Any]:
    """
    Check whether a formatter, linter or test framework can be run.

    Args:
        kind: "formatter", "linter" or "test_framework"
        name: Tool name (e.g., "black", "mypy", "pytest")

    Returns:
        Success:
            {
                "status": "success",
                "kind": "linter",
                "name": "mypy",
                "available": true
            }

        Unrecognised names report available=false rather than an error.

        Error (malformed input):
            {"status": "error", "error_code": "validation_error", "message": ...}
    """
    new_request_id()
    logger.info(f"check_tool called: kind={kind}, name={name}")

    try:
        tool_kind, tool_name = validate_tool_input(kind, name)
    except ValidationError as e:
        logger.warning(f"Input validation failed: {e}")
        return e.to_error_response()

    start_time = time.time()
    available = await asyncio.to_thread(ToolProbe().is_available, tool_kind, tool_name)
    await get_metrics_collector().record(
        workspace_root=Path.cwd(),
        operation="tool_probe",
        duration_ms=(time.time() - start_time) * 1000,
        success=True,
    )

    return {
        "status": "success",
        "kind": tool_kind.value,
        "name": tool_name,
        "available": available,
    }
