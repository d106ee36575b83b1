"""Interpreter version and installed-package probes."""

import re
from pathlib import Path
from typing import Sequence

from ..backends.base import BackendError, ProcessResult, ProcessRunner
from ..backends.process import SubprocessRunner
from ..logging_config import get_logger

logger = get_logger("context.version")

VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")
FREEZE_LINE_PATTERN = re.compile(r"^([^=]+)=")
# Per-invocation bound when no runner is supplied
DEFAULT_PROBE_TIMEOUT = 30.0

MODULE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def parse_version(output: str | None) -> str | None:
    """
    Extract the first MAJOR.MINOR.PATCH from interpreter output.

    Args:
        output: Text printed by `python --version` (e.g., "Python 3.11.4")

    Returns:
        Version string (e.g., "3.11.4") or None if there is no dotted triple
    """
    if not output:
        return None
    match = VERSION_PATTERN.search(output)
    return match.group(0) if match else None


def parse_freeze_output(output: str | None) -> list[str]:
    """
    Extract package names from freeze-format listing.

    Each "name==version" line yields "name"; lines without a name before
    "=" are skipped.

    Args:
        output: `pip list --format=freeze` output

    Returns:
        Package names in listing order
    """
    if not output:
        return []

    packages = []
    for line in output.splitlines():
        match = FREEZE_LINE_PATTERN.match(line.strip())
        if match:
            name = match.group(1).strip()
            if name:
                packages.append(name)
    return packages


class VersionProbe:
    """Ask an interpreter about itself by running it."""

    def __init__(self, runner: ProcessRunner | None = None) -> None:
        self.runner = runner or SubprocessRunner(timeout=DEFAULT_PROBE_TIMEOUT)

    def _run(
        self, interpreter: Path | str, args: Sequence[str], cwd: Path | None = None
    ) -> ProcessResult | None:
        """
        Run the interpreter, mapping failures to None.

        A launch failure or non-zero exit means "no output". Timeouts are
        re-raised so callers can tell a hung interpreter from a missing one.
        """
        try:
            result = self.runner.run(interpreter, args, cwd=cwd)
        except BackendError as e:
            if e.error_code == "timeout":
                raise
            logger.debug(
                f"Interpreter probe failed: {e.message}",
                extra={"interpreter": str(interpreter), "error_code": e.error_code},
            )
            return None

        if not result.ok:
            logger.debug(
                f"Interpreter probe exited with {result.return_code}",
                extra={"interpreter": str(interpreter), "return_code": result.return_code},
            )
            return None
        return result

    def get_version(
        self, interpreter: Path | str | None, *, cwd: Path | None = None
    ) -> str | None:
        """
        Return the interpreter's MAJOR.MINOR.PATCH version.

        Args:
            interpreter: Interpreter path; None yields None
            cwd: Working directory for the interpreter (inherited if None)

        Returns:
            Version string, or None on failure or unparseable output

        Raises:
            BackendError: If the interpreter does not answer within the timeout
        """
        if interpreter is None:
            return None

        result = self._run(interpreter, ["--version"], cwd)
        if result is None:
            return None

        version = parse_version(result.combined_output)
        if version is None:
            logger.debug(f"No version in output of {interpreter} --version")
        return version

    def list_installed_packages(
        self, interpreter: Path | str | None, *, cwd: Path | None = None
    ) -> list[str]:
        """
        Return the names of packages installed for the interpreter.

        Args:
            interpreter: Interpreter path; None yields an empty list
            cwd: Working directory for pip (inherited if None)

        Returns:
            Package names in pip's listing order, empty on any failure

        Raises:
            BackendError: If pip does not answer within the timeout
        """
        if interpreter is None:
            return []

        result = self._run(interpreter, ["-m", "pip", "list", "--format=freeze"], cwd)
        if result is None:
            return []
        return parse_freeze_output(result.stdout)

    def is_package_installed(
        self, interpreter: Path | str | None, package: str, *, cwd: Path | None = None
    ) -> bool:
        """
        Check whether `import <package>` succeeds in the interpreter.

        Args:
            interpreter: Interpreter path; None yields False
            package: Dotted module name (e.g., "requests", "yaml")
            cwd: Directory the import runs from. With `-c` it is the first
                sys.path entry, so modules at the project root are importable.

        Returns:
            True if the import succeeds. Names that are not dotted Python
            identifiers are rejected without running anything.

        Raises:
            BackendError: If the import does not finish within the timeout
        """
        if interpreter is None:
            return False
        if not MODULE_NAME_PATTERN.fullmatch(package):
            logger.warning(f"Rejected invalid module name: {package!r}")
            return False

        return self._run(interpreter, ["-c", f"import {package}"], cwd) is not None
