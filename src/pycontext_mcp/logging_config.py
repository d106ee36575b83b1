"""Logging configuration for pycontext-mcp.

JSON lines go to stderr (stdout belongs to the MCP stdio transport), with an
optional human-readable rotating log file for development.

IMPORTANT: No logging at import time. All logging setup must happen explicitly
via setup_logging().
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

# Request ID for correlating the log lines of one tool call
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

# Record attributes passed through `extra=` that end up in the JSON line
EXTRA_FIELDS = (
    "path",
    "command",
    "duration",
    "error_code",
    "return_code",
    "venv",
    "interpreter",
)


class JsonFormatter(logging.Formatter):
    """Format log records as JSON lines for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id := request_id_var.get():
            log_obj["request_id"] = request_id

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_obj[key] = getattr(record, key)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class RequestIdFilter(logging.Filter):
    """Inject request_id into log records from context variable."""

    def filter(self, record: logging.LogRecord) -> bool:
        if request_id := request_id_var.get():
            record.request_id = request_id  # type: ignore[attr-defined]
        return True


def new_request_id() -> str:
    """
    Start a new correlation ID for the current context.

    Tool handlers call this on entry; every log line emitted while handling
    the call (including from worker threads started with asyncio.to_thread,
    which copy the context) carries the same request_id.

    Returns:
        The generated request ID
    """
    request_id = uuid.uuid4().hex[:12]
    request_id_var.set(request_id)
    return request_id


def setup_logging(config: "Config") -> None:
    """
    Configure logging based on config.log_mode.

    Args:
        config: Configuration instance with logging settings

    Logging Modes:
        - "stderr": JSON formatter to stderr (default for production)
        - "file": Human-readable format to config.log_file
        - "both": Both outputs

    IMPORTANT: This function should be called once at application startup,
    NOT at module import time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    json_formatter = JsonFormatter()
    human_formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    request_id_filter = RequestIdFilter()

    if config.log_mode in ("stderr", "both"):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(json_formatter)
        stderr_handler.addFilter(request_id_filter)
        root_logger.addHandler(stderr_handler)

    if config.log_mode in ("file", "both"):
        log_file = _get_log_file(config)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(human_formatter)
        file_handler.addFilter(request_id_filter)
        root_logger.addHandler(file_handler)

        _create_current_log_symlink(log_file)

    logging.getLogger("pycontext_mcp").setLevel(config.log_level)

    logging.info(
        "Logging initialized",
        extra={
            "log_mode": config.log_mode,
            "log_level": config.log_level,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the pycontext_mcp namespace.

    Args:
        name: Logger name (e.g., "context.venv")

    Returns:
        Logger instance for "pycontext_mcp.<name>"

    Example:
        >>> logger = get_logger("context.venv")
        >>> logger.name
        'pycontext_mcp.context.venv'
    """
    return logging.getLogger(f"pycontext_mcp.{name}")


def _get_log_file(config: "Config") -> Path:
    """Return config.log_file, or a timestamped file in the platform log directory."""
    if config.log_file:
        return config.log_file

    log_dir = _get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return log_dir / f"pycontext-mcp-{timestamp}.log"


def _get_log_directory() -> Path:
    if sys.platform == "win32":
        return Path.home() / "AppData" / "Local" / "pycontext-mcp" / "logs"
    return Path.home() / ".pycontext-mcp" / "logs"


def _create_current_log_symlink(log_file: Path) -> None:
    """Point current.log at the active log file."""
    current_link = log_file.parent / "current.log"

    if current_link.exists() or current_link.is_symlink():
        current_link.unlink()

    try:
        current_link.symlink_to(log_file.name)
    except OSError:
        # Symlinks may not be supported on some systems
        pass
