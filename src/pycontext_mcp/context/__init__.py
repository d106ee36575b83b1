"""Project and environment resolution."""

from .interpreter import InterpreterResolver
from .paths import PathTools
from .project import MARKER_FILES, ProjectClassifier, ProjectInfo, detect_project
from .tools import TOOL_COMMANDS, ToolKind, ToolProbe
from .venv import (
    MAX_ANCESTOR_DEPTH,
    VENV_DIR_NAMES,
    VenvLocator,
    VirtualEnvironment,
    looks_like_venv_interpreter,
)
from .version import VersionProbe, parse_freeze_output, parse_version

__all__ = [
    "InterpreterResolver",
    "MARKER_FILES",
    "MAX_ANCESTOR_DEPTH",
    "PathTools",
    "ProjectClassifier",
    "ProjectInfo",
    "TOOL_COMMANDS",
    "ToolKind",
    "ToolProbe",
    "VENV_DIR_NAMES",
    "VenvLocator",
    "VersionProbe",
    "VirtualEnvironment",
    "detect_project",
    "looks_like_venv_interpreter",
    "parse_freeze_output",
    "parse_version",
]
