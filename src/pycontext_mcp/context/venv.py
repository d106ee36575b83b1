"""Virtual environment discovery and description."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..logging_config import get_logger
from .paths import PathTools

logger = get_logger("context.venv")

# Conventional venv directory names, most common first
VENV_DIR_NAMES = (".venv", "venv", "env", ".env", "virtualenv", ".virtualenv")

# Number of ancestor directories searched above the start directory
MAX_ANCESTOR_DEPTH = 5

# Path segments that mark an interpreter as living inside a venv
VENV_PATH_SEGMENTS = ("/venv/", "/env/", "/virtualenv/")


@dataclass(frozen=True)
class VirtualEnvironment:
    """Description of a virtual environment.

    Attributes:
        path: Virtual environment directory
        python_path: Interpreter inside the environment, if one exists
        name: Directory name of the environment
        kind: "venv", "virtualenv", "uv" or "conda"
        active: Whether the environment is the one activated in the
            process environment (VIRTUAL_ENV / CONDA_PREFIX)
    """

    path: Path
    python_path: Path | None
    name: str
    kind: str
    active: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "python_path": str(self.python_path) if self.python_path else None,
            "name": self.name,
            "kind": self.kind,
            "active": self.active,
        }


class VenvLocator:
    """Bounded upward search for a virtual environment directory."""

    def __init__(
        self,
        paths: PathTools | None = None,
        *,
        max_depth: int = MAX_ANCESTOR_DEPTH,
    ) -> None:
        self.paths = paths or PathTools()
        self.max_depth = max_depth

    def find_in(self, directory: Path) -> Path | None:
        """Return the first conventional venv directory directly under directory."""
        for name in VENV_DIR_NAMES:
            candidate = self.paths.join_path(directory, name)
            if self.paths.directory_exists(candidate):
                return candidate
        return None

    def locate(self, start_dir: Path, enabled: bool) -> Path | None:
        """
        Find a virtual environment for start_dir.

        Search order:
        1. Each name in VENV_DIR_NAMES directly under start_dir
        2. The same names under each ancestor, nearest first, for at most
           max_depth levels or until the filesystem root

        Args:
            start_dir: Directory to search from
            enabled: Virtual environment support switch; False always
                yields None without touching the filesystem

        Returns:
            Path to the venv directory, or None if none found
        """
        if not enabled:
            return None

        found = self.find_in(start_dir)
        if found is not None:
            logger.debug(f"Found venv in start directory: {found}")
            return found

        current = start_dir
        for _ in range(self.max_depth):
            parent = self.paths.parent_of(current)
            if parent == current:
                break

            found = self.find_in(parent)
            if found is not None:
                logger.debug(f"Found venv in ancestor directory: {found}")
                return found

            current = parent

        logger.debug(f"No virtual environment found from {start_dir}")
        return None

    def active_venv(self, environ: Mapping[str, str] | None = None) -> Path | None:
        """
        Return the externally activated venv, if it exists.

        Args:
            environ: Environment mapping (os.environ if None)

        Returns:
            Path from VIRTUAL_ENV when it names an existing directory
        """
        environ = os.environ if environ is None else environ
        virtual_env = environ.get("VIRTUAL_ENV")
        if virtual_env and self.paths.directory_exists(virtual_env):
            return Path(virtual_env)
        if virtual_env:
            logger.warning(f"VIRTUAL_ENV points to missing directory: {virtual_env}")
        return None

    def describe(
        self,
        venv_path: Path,
        python_path: Path | None,
        environ: Mapping[str, str] | None = None,
    ) -> VirtualEnvironment:
        """
        Build a VirtualEnvironment description for venv_path.

        Args:
            venv_path: Virtual environment directory
            python_path: Interpreter resolved for the environment
            environ: Environment mapping (os.environ if None)

        Returns:
            VirtualEnvironment snapshot
        """
        environ = os.environ if environ is None else environ
        kind = self.detect_kind(venv_path)
        activation_var = "CONDA_PREFIX" if kind == "conda" else "VIRTUAL_ENV"
        return VirtualEnvironment(
            path=venv_path,
            python_path=python_path,
            name=venv_path.name,
            kind=kind,
            active=_same_directory(environ.get(activation_var), venv_path),
        )

    def detect_kind(self, venv_path: Path) -> str:
        """
        Classify the tool that created a virtual environment.

        conda environments carry a conda-meta/ directory; virtualenv and uv
        record themselves in pyvenv.cfg. Anything else is a stdlib venv.
        """
        if self.paths.directory_exists(self.paths.join_path(venv_path, "conda-meta")):
            return "conda"

        cfg = self.paths.join_path(venv_path, "pyvenv.cfg")
        if self.paths.file_exists(cfg):
            keys = _read_pyvenv_keys(cfg)
            if "virtualenv" in keys:
                return "virtualenv"
            if "uv" in keys:
                return "uv"
        return "venv"


def looks_like_venv_interpreter(python_path: Path | str | None) -> bool:
    """
    Guess from the path text alone whether an interpreter lives in a venv.

    Best-effort: matches the /venv/, /env/ and /virtualenv/ segments only,
    so interpreters under .venv or custom-named directories are not
    recognised, and an unrelated directory named "env" is a false positive.
    """
    if python_path is None:
        return False
    text = str(python_path).replace("\\", "/")
    return any(segment in text for segment in VENV_PATH_SEGMENTS)


def _read_pyvenv_keys(cfg: Path) -> set[str]:
    """Return the lower-cased keys of a pyvenv.cfg file (empty if unreadable)."""
    try:
        content = cfg.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {cfg}: {e}")
        return set()

    keys = set()
    for line in content.splitlines():
        key, sep, _ = line.partition("=")
        if sep:
            keys.add(key.strip().lower())
    return keys


def _same_directory(value: str | None, path: Path) -> bool:
    if not value:
        return False
    try:
        return Path(value).resolve() == path.resolve()
    except (OSError, RuntimeError):
        return False
