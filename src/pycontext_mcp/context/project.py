"""Project classification: marker files, virtual environment and interpreter."""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..config import ResolutionConfig
from ..logging_config import get_logger
from .interpreter import InterpreterResolver
from .paths import PathTools
from .venv import VenvLocator, VirtualEnvironment, looks_like_venv_interpreter

logger = get_logger("context.project")

# Files whose presence marks a directory as a Python project
MARKER_FILES = (
    "requirements.txt",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "Pipfile",
    "poetry.lock",
)


@dataclass(frozen=True)
class ProjectInfo:
    """Snapshot of a directory's Python execution context.

    Attributes:
        root: Directory that was classified
        is_python_project: True if any marker file is present
        has_requirements: requirements.txt present
        has_pyproject: pyproject.toml present
        has_setup_py: setup.py present
        has_venv: A virtual environment was found
        venv_path: Virtual environment directory if found
        python_path: Interpreter that applies, if any was resolved
        package_manager: Package manager name from configuration
        markers: Every marker file found, in MARKER_FILES order
    """

    root: Path
    is_python_project: bool = False
    has_requirements: bool = False
    has_pyproject: bool = False
    has_setup_py: bool = False
    has_venv: bool = False
    venv_path: Path | None = None
    python_path: Path | None = None
    package_manager: str = "pip"
    markers: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "is_python_project": self.is_python_project,
            "has_requirements": self.has_requirements,
            "has_pyproject": self.has_pyproject,
            "has_setup_py": self.has_setup_py,
            "has_venv": self.has_venv,
            "venv_path": str(self.venv_path) if self.venv_path else None,
            "python_path": str(self.python_path) if self.python_path else None,
            "package_manager": self.package_manager,
            "markers": list(self.markers),
        }


class ProjectClassifier:
    """Compose marker detection, venv search and interpreter resolution.

    The classifier holds its collaborators, never configuration or results,
    so one instance can classify any number of directories concurrently.

    Args:
        paths: Filesystem probe and search-path lookup
        locator: Virtual environment search (built on paths if None)
        interpreters: Interpreter resolution (built on paths if None)
        environ: Process environment used for VIRTUAL_ENV (os.environ if None)
    """

    def __init__(
        self,
        paths: PathTools | None = None,
        *,
        locator: VenvLocator | None = None,
        interpreters: InterpreterResolver | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.paths = paths or PathTools()
        self.locator = locator or VenvLocator(self.paths)
        self.interpreters = interpreters or InterpreterResolver(self.paths)
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def find_markers(self, directory: Path) -> tuple[str, ...]:
        """Return every marker file present in directory (all are checked)."""
        return tuple(
            marker
            for marker in MARKER_FILES
            if self.paths.file_exists(self.paths.join_path(directory, marker))
        )

    def find_venv(self, cwd: Path, config: ResolutionConfig) -> Path | None:
        """
        Find the virtual environment that applies to cwd.

        With auto-detection on, the directory tree is searched. With it off,
        only an externally activated VIRTUAL_ENV is considered. With virtual
        environment support disabled, nothing is.
        """
        if not config.enable_virtual_env:
            return None
        if config.auto_detect_venv:
            return self.locator.locate(cwd, enabled=True)
        return self.locator.active_venv(self.environ)

    def resolve_interpreter(
        self, venv_path: Path | None, config: ResolutionConfig
    ) -> Path | None:
        """Venv interpreter first; the system chain only when there is none."""
        if venv_path is not None:
            python_path = self.interpreters.resolve_from_venv(venv_path)
            if python_path is not None:
                return python_path
            logger.warning(
                f"Virtual environment has no interpreter, using system Python: {venv_path}",
                extra={"venv": str(venv_path)},
            )
        return self.interpreters.resolve_system_interpreter(config.python_command)

    def classify(self, cwd: Path, config: ResolutionConfig) -> ProjectInfo:
        """
        Classify a directory.

        Args:
            cwd: Directory to classify (a file path classifies its parent)
            config: Resolution settings

        Returns:
            New ProjectInfo reflecting the filesystem at call time
        """
        root = Path(cwd).resolve()
        if self.paths.file_exists(root):
            root = root.parent

        markers = self.find_markers(root)
        venv_path = self.find_venv(root, config)
        python_path = self.resolve_interpreter(venv_path, config)

        info = ProjectInfo(
            root=root,
            is_python_project=bool(markers),
            has_requirements="requirements.txt" in markers,
            has_pyproject="pyproject.toml" in markers,
            has_setup_py="setup.py" in markers,
            has_venv=venv_path is not None,
            venv_path=venv_path,
            python_path=python_path,
            package_manager=config.package_manager,
            markers=markers,
        )
        logger.info(
            f"Classified {root}: python_project={info.is_python_project}, "
            f"venv={venv_path}, interpreter={python_path}",
            extra={"path": str(root), "interpreter": str(python_path)},
        )
        return info

    def _classified(
        self, cwd: Path, config: ResolutionConfig, info: ProjectInfo | None
    ) -> ProjectInfo:
        return info if info is not None else self.classify(cwd, config)

    def is_venv_active(
        self, cwd: Path, config: ResolutionConfig, *, info: ProjectInfo | None = None
    ) -> bool:
        """
        Best-effort check whether a virtual environment is in effect.

        True when VIRTUAL_ENV names an existing directory, or when the
        interpreter resolved for cwd looks like a venv interpreter (see
        looks_like_venv_interpreter). Neither signal is authoritative.

        Args:
            cwd: Directory to check
            config: Resolution settings
            info: Result of classify() for cwd, reused instead of classifying again
        """
        if self.locator.active_venv(self.environ) is not None:
            return True
        return looks_like_venv_interpreter(self.get_python_path(cwd, config, info=info))

    def get_python_path(
        self, cwd: Path, config: ResolutionConfig, *, info: ProjectInfo | None = None
    ) -> Path | None:
        return self._classified(cwd, config, info).python_path

    def is_python_available(
        self, cwd: Path, config: ResolutionConfig, *, info: ProjectInfo | None = None
    ) -> bool:
        return self.get_python_path(cwd, config, info=info) is not None

    def get_venv_info(self, cwd: Path, config: ResolutionConfig) -> VirtualEnvironment | None:
        """Describe the virtual environment that applies to cwd, if any."""
        info = self.classify(cwd, config)
        if info.venv_path is None:
            return None
        python_path = info.python_path
        if python_path is not None and not _is_within(python_path, info.venv_path):
            python_path = None
        return self.locator.describe(info.venv_path, python_path, self.environ)

    def should_load(
        self, path: Path, config: ResolutionConfig, *, info: ProjectInfo | None = None
    ) -> bool:
        """
        Decide whether Python tooling applies to path.

        True for a .py file, or for a directory classified as a Python project.
        """
        path = Path(path)
        if path.suffix == ".py":
            return True
        return self._classified(path, config, info).is_python_project


async def detect_project(path: Path, config: ResolutionConfig) -> ProjectInfo:
    """
    Classify path without blocking the event loop.

    The filesystem walk and which() lookups run in a worker thread.

    Args:
        path: Directory (or file) to classify
        config: Resolution settings

    Returns:
        ProjectInfo for path
    """
    return await asyncio.to_thread(ProjectClassifier().classify, path, config)


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.relative_to(directory)
        return True
    except ValueError:
        return False
