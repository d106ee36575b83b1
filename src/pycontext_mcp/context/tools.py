"""Availability probes for external development tools."""

from enum import Enum

from ..logging_config import get_logger
from .paths import PathTools

logger = get_logger("context.tools")


class ToolKind(str, Enum):
    """Category of development tool."""

    FORMATTER = "formatter"
    LINTER = "linter"
    TEST_FRAMEWORK = "test_framework"

    @classmethod
    def parse(cls, value: "str | ToolKind") -> "ToolKind | None":
        """Parse a kind name; accepts "testFramework" and "test-framework" too."""
        if isinstance(value, ToolKind):
            return value
        normalized = value.strip().replace("-", "_")
        if normalized == "testFramework":
            normalized = "test_framework"
        try:
            return cls(normalized.lower())
        except ValueError:
            return None


# Recognised tool names per kind, mapped to the executable that provides them.
# None marks a tool backed by the standard library.
TOOL_COMMANDS: dict[ToolKind, dict[str, str | None]] = {
    ToolKind.FORMATTER: {
        "black": "black",
        "isort": "isort",
        "autopep8": "autopep8",
    },
    ToolKind.LINTER: {
        "flake8": "flake8",
        "pylint": "pylint",
        "mypy": "mypy",
    },
    ToolKind.TEST_FRAMEWORK: {
        "pytest": "pytest",
        "unittest": None,
        "nose": "nosetests",
    },
}


class ToolProbe:
    """Answer "can this tool be run here?" from the search path.

    Results are never cached; every query looks at the search path again.
    """

    def __init__(self, paths: PathTools | None = None) -> None:
        self.paths = paths or PathTools()

    def is_available(self, kind: "str | ToolKind", name: str) -> bool:
        """
        Check whether a named tool can be run.

        Args:
            kind: formatter, linter or test_framework
            name: Tool name (e.g., "black", "pytest")

        Returns:
            True if the tool is built in or its executable is on the search
            path; False for unknown kinds and names
        """
        tool_kind = ToolKind.parse(kind)
        if tool_kind is None:
            logger.debug(f"Unknown tool kind: {kind}")
            return False

        commands = TOOL_COMMANDS[tool_kind]
        if name not in commands:
            logger.debug(f"Unknown {tool_kind.value}: {name}")
            return False

        command = commands[name]
        if command is None:
            return True

        return self.paths.which(command) is not None

    def available_tools(self) -> dict[str, dict[str, bool]]:
        """Probe every recognised tool, grouped by kind."""
        return {
            kind.value: {name: self.is_available(kind, name) for name in commands}
            for kind, commands in TOOL_COMMANDS.items()
        }
