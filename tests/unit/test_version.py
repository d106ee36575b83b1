"""Unit tests for interpreter version and package probes."""

from pathlib import Path
from typing import Sequence

import pytest

from pycontext_mcp.backends.base import BackendError, ProcessResult
from pycontext_mcp.backends.process import SubprocessRunner
from pycontext_mcp.context.version import (
    DEFAULT_PROBE_TIMEOUT,
    VersionProbe,
    parse_freeze_output,
    parse_version,
)

PYTHON = Path("/project/.venv/bin/python")


class FakeRunner:
    """ProcessRunner returning canned results and recording calls."""

    def __init__(self, result: ProcessResult | None = None, error: BackendError | None = None):
        self.result = result or ProcessResult("", "", 0)
        self.error = error
        self.calls: list[list[str]] = []
        self.cwds: list[Path | None] = []

    def run(self, command, args: Sequence[str] = (), *, cwd=None) -> ProcessResult:
        self.calls.append([str(command), *args])
        self.cwds.append(cwd)
        if self.error is not None:
            raise self.error
        return self.result


class TestParseVersion:
    """Tests for parse_version() function."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("Python 3.11.4", "3.11.4"),
            ("Python 3.12.0rc1\n", "3.12.0"),
            ("Python 2.7.18", "2.7.18"),
            ("PyPy 7.3.13 with GCC\nPython 3.10.13", "7.3.13"),
        ],
    )
    def test_parse_version(self, output: str, expected: str):
        assert parse_version(output) == expected

    @pytest.mark.parametrize("output", ["", None, "Python 3.11", "no version here"])
    def test_parse_version_without_triple(self, output):
        assert parse_version(output) is None


class TestParseFreezeOutput:
    """Tests for parse_freeze_output() function."""

    def test_parse_freeze_output(self):
        assert parse_freeze_output("requests==2.31.0\nflask==2.3.2\n") == ["requests", "flask"]

    def test_parse_freeze_output_empty(self):
        assert parse_freeze_output("") == []
        assert parse_freeze_output(None) == []

    def test_parse_freeze_output_skips_malformed_lines(self):
        output = "requests==2.31.0\n\n==1.0\n# comment\nclick===8.1.7\n"
        assert parse_freeze_output(output) == ["requests", "click"]

    def test_parse_freeze_output_preserves_order(self):
        output = "zope.interface==6.1\naiohttp==3.9.1\nattrs==23.1.0\n"
        assert parse_freeze_output(output) == ["zope.interface", "aiohttp", "attrs"]


class TestGetVersion:
    """Tests for VersionProbe.get_version()."""

    def test_get_version(self):
        runner = FakeRunner(ProcessResult("Python 3.11.4\n", "", 0))

        assert VersionProbe(runner).get_version(PYTHON) == "3.11.4"
        assert runner.calls == [[str(PYTHON), "--version"]]

    def test_get_version_reads_stderr(self):
        runner = FakeRunner(ProcessResult("", "Python 2.7.18\n", 0))
        assert VersionProbe(runner).get_version(PYTHON) == "2.7.18"

    def test_get_version_without_interpreter(self):
        runner = FakeRunner()

        assert VersionProbe(runner).get_version(None) is None
        assert runner.calls == []

    def test_get_version_unparseable_output(self):
        runner = FakeRunner(ProcessResult("Python\n", "", 0))
        assert VersionProbe(runner).get_version(PYTHON) is None

    def test_get_version_nonzero_exit(self):
        runner = FakeRunner(ProcessResult("Python 3.11.4", "", 1))
        assert VersionProbe(runner).get_version(PYTHON) is None

    def test_get_version_missing_executable(self):
        runner = FakeRunner(error=BackendError("not_found", "Executable not found"))
        assert VersionProbe(runner).get_version(PYTHON) is None

    def test_get_version_timeout_propagates(self):
        runner = FakeRunner(error=BackendError("timeout", "timed out", recoverable=True))

        with pytest.raises(BackendError) as exc_info:
            VersionProbe(runner).get_version(PYTHON)

        assert exc_info.value.error_code == "timeout"


class TestListInstalledPackages:
    """Tests for VersionProbe.list_installed_packages()."""

    def test_list_installed_packages(self):
        runner = FakeRunner(ProcessResult("requests==2.31.0\nflask==2.3.2\n", "", 0))

        packages = VersionProbe(runner).list_installed_packages(PYTHON)

        assert packages == ["requests", "flask"]
        assert runner.calls == [[str(PYTHON), "-m", "pip", "list", "--format=freeze"]]

    def test_list_installed_packages_ignores_stderr_notices(self):
        runner = FakeRunner(
            ProcessResult("pip==24.0\n", "[notice] A new release of pip is available\n", 0)
        )
        assert VersionProbe(runner).list_installed_packages(PYTHON) == ["pip"]

    def test_list_installed_packages_pip_missing(self):
        runner = FakeRunner(ProcessResult("", "No module named pip", 1))
        assert VersionProbe(runner).list_installed_packages(PYTHON) == []

    def test_list_installed_packages_without_interpreter(self):
        assert VersionProbe(FakeRunner()).list_installed_packages(None) == []


class TestIsPackageInstalled:
    """Tests for VersionProbe.is_package_installed()."""

    def test_installed(self):
        runner = FakeRunner(ProcessResult("", "", 0))

        assert VersionProbe(runner).is_package_installed(PYTHON, "requests") is True
        assert runner.calls == [[str(PYTHON), "-c", "import requests"]]

    def test_not_installed(self):
        runner = FakeRunner(ProcessResult("", "ModuleNotFoundError: No module named 'nope'", 1))
        assert VersionProbe(runner).is_package_installed(PYTHON, "nope") is False

    def test_dotted_module_name(self):
        runner = FakeRunner(ProcessResult("", "", 0))
        assert VersionProbe(runner).is_package_installed(PYTHON, "xml.etree") is True

    @pytest.mark.parametrize(
        "package",
        ["os; import shutil", "requests\nimport os", "", "1abc", "-m pip"],
    )
    def test_invalid_module_name_is_not_run(self, package: str):
        runner = FakeRunner(ProcessResult("", "", 0))

        assert VersionProbe(runner).is_package_installed(PYTHON, package) is False
        assert runner.calls == []

    def test_without_interpreter(self):
        assert VersionProbe(FakeRunner()).is_package_installed(None, "requests") is False

    def test_timeout_propagates(self):
        runner = FakeRunner(error=BackendError("timeout", "timed out", recoverable=True))

        with pytest.raises(BackendError):
            VersionProbe(runner).is_package_installed(PYTHON, "requests")


class TestWorkingDirectory:
    """Probes run in the directory they are given."""

    PROJECT = Path("/project")

    def test_cwd_forwarded_to_runner(self):
        runner = FakeRunner(ProcessResult("Python 3.11.4\n", "", 0))
        probe = VersionProbe(runner)

        probe.get_version(PYTHON, cwd=self.PROJECT)
        probe.list_installed_packages(PYTHON, cwd=self.PROJECT)
        probe.is_package_installed(PYTHON, "localmod", cwd=self.PROJECT)

        assert runner.cwds == [self.PROJECT, self.PROJECT, self.PROJECT]

    def test_cwd_defaults_to_inherited(self):
        runner = FakeRunner(ProcessResult("", "", 0))

        VersionProbe(runner).is_package_installed(PYTHON, "requests")

        assert runner.cwds == [None]


class TestDefaultRunner:
    """Tests for the runner built when none is supplied."""

    def test_default_runner_ignores_environment(self, set_env_vars):
        set_env_vars(PYCONTEXT_MCP_PROCESS_TIMEOUT="not-a-number")

        probe = VersionProbe()

        assert isinstance(probe.runner, SubprocessRunner)
        assert probe.runner.timeout == DEFAULT_PROBE_TIMEOUT
