"""Runtime configuration management.

Environment Variables:
    PYCONTEXT_MCP_PYTHON_COMMAND: Preferred interpreter command (default: python3)
    PYCONTEXT_MCP_ENABLE_VIRTUAL_ENV: Enable virtual environment support (default: true)
    PYCONTEXT_MCP_AUTO_DETECT_VENV: Search the directory tree for a venv (default: true)
    PYCONTEXT_MCP_PACKAGE_MANAGER: Package manager name (default: pip)
    PYCONTEXT_MCP_PROCESS_TIMEOUT: Subprocess timeout in seconds (default: 30.0)
    PYCONTEXT_MCP_ALLOWED_PATHS: Colon-separated list of allowed paths (default: None)
    PYCONTEXT_MCP_LOG_LEVEL: Logging level (default: INFO)
    PYCONTEXT_MCP_LOG_MODE: Logging mode: stderr, file, both (default: stderr)
    PYCONTEXT_MCP_LOG_FILE: Log file path (optional, for file/both modes)
    PYCONTEXT_MCP_ENABLE_HEALTH_CHECK: Enable health_check tool (default: true)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, cast

KNOWN_PACKAGE_MANAGERS = frozenset({"pip", "pipenv", "poetry", "pdm", "uv", "conda"})


@dataclass(frozen=True)
class ResolutionConfig:
    """Immutable input to every resolution call.

    Attributes:
        python_command: Preferred interpreter command, tried before python3/python/py
        enable_virtual_env: Master switch for virtual environment support
        auto_detect_venv: Search the directory tree for a venv directory
        package_manager: Package manager name reported in ProjectInfo
    """

    python_command: str = "python3"
    enable_virtual_env: bool = True
    auto_detect_venv: bool = True
    package_manager: str = "pip"


@dataclass
class Config:
    """Runtime configuration for pycontext-mcp."""

    python_command: str  # Preferred interpreter command
    enable_virtual_env: bool  # Virtual environment support switch
    auto_detect_venv: bool  # Ancestor search for venv directories
    package_manager: str  # Package manager name
    process_timeout: float  # Subprocess timeout (seconds)
    allowed_paths: list[Path] | None  # Workspace restriction (None = allow all)
    log_level: str  # Logging level: DEBUG, INFO, WARNING, ERROR
    log_mode: Literal["stderr", "file", "both"]  # Logging mode
    log_file: Path | None  # Log file path (for file/both modes)
    enable_health_check: bool  # Enable health_check tool

    def resolution_config(self) -> ResolutionConfig:
        """Snapshot the resolution-related settings as an immutable value."""
        return ResolutionConfig(
            python_command=self.python_command,
            enable_virtual_env=self.enable_virtual_env,
            auto_detect_venv=self.auto_detect_venv,
            package_manager=self.package_manager,
        )


_config: Config | None = None


def _parse_bool(name: str, default: str) -> bool:
    """Parse a boolean environment variable, rejecting anything but true/false."""
    value = os.getenv(name, default).strip().lower()
    if value not in ("true", "false"):
        raise ValueError(f"{name} must be 'true' or 'false', got: {value}")
    return value == "true"


def _parse_positive_float(name: str, default: str) -> float:
    value_str = os.getenv(name, default)
    try:
        value = float(value_str)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got: {value_str}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got: {value}")
    return value


def load_config() -> Config:
    """
    Load configuration from environment variables.

    Validates all configuration values and returns a Config instance with
    defaults applied. The resolution engine assumes its input is well-typed,
    so every malformed value fails here.

    Returns:
        Config instance with validated values

    Raises:
        ValueError: If configuration values are invalid
    """
    # Parse interpreter preference
    python_command = os.getenv("PYCONTEXT_MCP_PYTHON_COMMAND", "python3").strip()
    if not python_command:
        raise ValueError("PYCONTEXT_MCP_PYTHON_COMMAND must be a non-empty string")

    enable_virtual_env = _parse_bool("PYCONTEXT_MCP_ENABLE_VIRTUAL_ENV", "true")
    auto_detect_venv = _parse_bool("PYCONTEXT_MCP_AUTO_DETECT_VENV", "true")

    # Parse package manager
    package_manager = os.getenv("PYCONTEXT_MCP_PACKAGE_MANAGER", "pip").strip().lower()
    if package_manager not in KNOWN_PACKAGE_MANAGERS:
        raise ValueError(
            f"PYCONTEXT_MCP_PACKAGE_MANAGER must be one of "
            f"{sorted(KNOWN_PACKAGE_MANAGERS)}, got: {package_manager}"
        )

    process_timeout = _parse_positive_float("PYCONTEXT_MCP_PROCESS_TIMEOUT", "30.0")

    # Parse allowed paths
    allowed_paths = None
    if allowed_paths_str := os.getenv("PYCONTEXT_MCP_ALLOWED_PATHS"):
        allowed_paths = [Path(p).resolve() for p in allowed_paths_str.split(":") if p]

    # Parse log level
    log_level = os.getenv("PYCONTEXT_MCP_LOG_LEVEL", "INFO").upper()
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if log_level not in valid_levels:
        raise ValueError(
            f"PYCONTEXT_MCP_LOG_LEVEL must be one of {valid_levels}, got: {log_level}"
        )

    # Parse log mode
    log_mode_str = os.getenv("PYCONTEXT_MCP_LOG_MODE", "stderr").lower()
    valid_modes = {"stderr", "file", "both"}
    if log_mode_str not in valid_modes:
        raise ValueError(
            f"PYCONTEXT_MCP_LOG_MODE must be one of {valid_modes}, got: {log_mode_str}"
        )
    log_mode = cast(Literal["stderr", "file", "both"], log_mode_str)

    # Parse log file
    log_file = None
    if log_file_str := os.getenv("PYCONTEXT_MCP_LOG_FILE"):
        log_file = Path(log_file_str).resolve()

    enable_health_check = _parse_bool("PYCONTEXT_MCP_ENABLE_HEALTH_CHECK", "true")

    return Config(
        python_command=python_command,
        enable_virtual_env=enable_virtual_env,
        auto_detect_venv=auto_detect_venv,
        package_manager=package_manager,
        process_timeout=process_timeout,
        allowed_paths=allowed_paths,
        log_level=log_level,
        log_mode=log_mode,
        log_file=log_file,
        enable_health_check=enable_health_check,
    )


def get_config() -> Config:
    """
    Get singleton config instance.

    Loads configuration on first call and caches the result.

    Returns:
        Config instance (loads on first call)
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """
    Reset cached config (for testing only).

    This clears the singleton config instance, forcing load_config() to be
    called again on the next get_config() call.
    """
    global _config
    _config = None
