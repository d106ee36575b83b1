"""Interpreter path resolution for virtual environments and the system."""

from pathlib import Path

from ..logging_config import get_logger
from .paths import PathTools

logger = get_logger("context.interpreter")

# Commands tried after the caller's preferred command, in order
SYSTEM_INTERPRETER_FALLBACKS = ("python3", "python", "py")


class InterpreterResolver:
    """Turn a venv root or a command preference into an interpreter path."""

    def __init__(self, paths: PathTools | None = None) -> None:
        self.paths = paths or PathTools()

    def venv_candidates(self, venv_root: Path) -> tuple[Path, Path]:
        """
        Return the (POSIX, Windows) interpreter locations inside a venv.

        Args:
            venv_root: Virtual environment directory

        Returns:
            Tuple of venv_root/bin/python and venv_root/Scripts/python.exe
        """
        return (
            self.paths.join_path(venv_root, "bin", "python"),
            self.paths.join_path(venv_root, "Scripts", "python.exe"),
        )

    def resolve_from_venv(
        self, venv_root: Path, *, require_exists: bool = True
    ) -> Path | None:
        """
        Resolve the interpreter inside a virtual environment.

        The POSIX layout wins when both layouts are present.

        Args:
            venv_root: Virtual environment directory
            require_exists: When False and neither interpreter exists, return
                the POSIX candidate unvalidated instead of None

        Returns:
            Interpreter path, or None if none exists and require_exists is set
        """
        posix_python, windows_python = self.venv_candidates(venv_root)

        if self.paths.file_exists(posix_python):
            return posix_python
        if self.paths.file_exists(windows_python):
            return windows_python

        if not require_exists:
            logger.debug(
                f"No interpreter under {venv_root}, using unvalidated {posix_python}"
            )
            return posix_python

        logger.debug(f"No interpreter found under venv: {venv_root}")
        return None

    def resolve_system_interpreter(self, preferred_command: str | None) -> Path | None:
        """
        Resolve an interpreter from the search path.

        Tries the preferred command, then python3, python and py, returning
        the first one that resolves. Repeated names are only tried once.

        Args:
            preferred_command: Caller's preferred command (e.g., "python3.12")

        Returns:
            Path to the interpreter, or None if no candidate resolves
        """
        candidates: list[str] = []
        for command in (preferred_command, *SYSTEM_INTERPRETER_FALLBACKS):
            if command and command not in candidates:
                candidates.append(command)

        for command in candidates:
            path = self.paths.which(command)
            if path is not None:
                logger.debug(f"Resolved system interpreter {command!r} -> {path}")
                return path

        logger.debug(f"No system interpreter found (tried: {', '.join(candidates)})")
        return None
