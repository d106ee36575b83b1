"""Pytest configuration and shared fixtures."""

import os
from pathlib import Path
from typing import Callable, Iterator

import pytest

from pycontext_mcp.config import Config, reset_config
from pycontext_mcp.metrics import reset_metrics_collector


@pytest.fixture(autouse=True)
def reset_config_fixture() -> Iterator[None]:
    """Reset config and metrics singletons between tests for isolation."""
    reset_config()
    reset_metrics_collector()
    yield
    reset_config()
    reset_metrics_collector()


@pytest.fixture
def no_virtual_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove activation variables so the host environment cannot leak in."""
    monkeypatch.delenv("VIRTUAL_ENV", raising=False)
    monkeypatch.delenv("CONDA_PREFIX", raising=False)


@pytest.fixture
def make_executable() -> Callable[[Path], Path]:
    """Create an empty executable file (parents included)."""

    def _make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def fake_bin(tmp_path: Path, make_executable: Callable[[Path], Path]):
    """Directory used as an isolated search path.

    Returns a function that adds executables to it; the directory itself is
    available as fake_bin.path.
    """
    bin_dir = tmp_path / "fake-bin"
    bin_dir.mkdir()

    class _FakeBin:
        path = bin_dir

        def add(self, *names: str) -> None:
            for name in names:
                make_executable(bin_dir / name)

        @property
        def search_path(self) -> str:
            return str(bin_dir)

    return _FakeBin()


@pytest.fixture
def project_with_venv(tmp_path: Path, make_executable: Callable[[Path], Path]) -> Path:
    """Create a project directory with pyproject.toml and a .venv interpreter."""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    (project_dir / "pyproject.toml").write_text('[project]\nname = "demo"\n')

    make_executable(project_dir / ".venv" / "bin" / "python")
    (project_dir / ".venv" / "pyvenv.cfg").write_text(
        "home = /usr/bin\ninclude-system-site-packages = false\nversion = 3.11.4\n"
    )
    return project_dir


@pytest.fixture
def make_config() -> Callable[..., Config]:
    """Build a Config with defaults, overriding selected fields."""

    def _make(**overrides) -> Config:
        values = {
            "python_command": "python3",
            "enable_virtual_env": True,
            "auto_detect_venv": True,
            "package_manager": "pip",
            "process_timeout": 30.0,
            "allowed_paths": None,
            "log_level": "INFO",
            "log_mode": "stderr",
            "log_file": None,
            "enable_health_check": True,
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def set_env_vars():
    """Fixture to temporarily set environment variables."""

    def _set_env_vars(**kwargs: str) -> None:
        for key, value in kwargs.items():
            os.environ[key] = value

    yield _set_env_vars

    keys_to_remove = [key for key in os.environ if key.startswith("PYCONTEXT_MCP_")]
    for key in keys_to_remove:
        del os.environ[key]
