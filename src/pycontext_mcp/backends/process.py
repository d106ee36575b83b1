"""Subprocess execution for interpreter and tool probes.

Commands are always passed as argument lists, never through a shell, so
paths containing shell metacharacters are handed to the child verbatim.
"""

import asyncio
import subprocess
from pathlib import Path
from typing import Sequence

from ..config import Config, get_config
from ..logging_config import get_logger
from .base import BackendError, ProcessResult

logger = get_logger("backends.process")


def build_command(command: str | Path, args: Sequence[str] = ()) -> list[str]:
    """
    Build an argument list for subprocess execution.

    Args:
        command: Executable name or path
        args: Arguments passed to the executable

    Returns:
        Command as list of strings (safe from shell injection)
    """
    return [str(command), *(str(arg) for arg in args)]


class SubprocessRunner:
    """Blocking process runner with a per-invocation time bound.

    This is the default ProcessRunner used by the resolution engine. Each
    call starts one child process, waits for it, and returns its output.
    """

    def __init__(self, config: Config | None = None, *, timeout: float | None = None):
        """
        Initialize runner.

        Args:
            config: Configuration instance (uses get_config() if not provided)
            timeout: Timeout in seconds, overriding config.process_timeout
        """
        if timeout is None:
            timeout = (config or get_config()).process_timeout
        self.timeout = timeout

    def run(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | None = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            command: Executable name or path
            args: Command arguments
            cwd: Working directory for the child (inherited if None)

        Returns:
            ProcessResult with decoded stdout, stderr and return code

        Raises:
            BackendError: not_found, timeout or execution_error
        """
        cmd = build_command(command, args)
        logger.debug("Running process", extra={"command": " ".join(cmd)})

        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            # subprocess.run() kills the child before raising
            raise BackendError(
                error_code="timeout",
                message=f"Command {cmd[0]} timed out after {self.timeout}s",
                recoverable=True,
            )
        except FileNotFoundError as e:
            raise BackendError(
                error_code="not_found",
                message=f"Executable not found: {cmd[0]} ({e})",
                recoverable=False,
            )
        except OSError as e:
            raise BackendError(
                error_code="execution_error",
                message=f"Failed to run {cmd[0]}: {e}",
                recoverable=False,
            )

        logger.debug(
            "Process completed",
            extra={"command": cmd[0], "return_code": completed.returncode},
        )
        return ProcessResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            return_code=completed.returncode,
        )


async def run_process_async(
    command: str | Path,
    args: Sequence[str] = (),
    *,
    timeout: float,
    cwd: Path | None = None,
) -> ProcessResult:
    """
    Execute a command asynchronously.

    Cancelling the awaiting task kills the child process before the
    cancellation propagates, so no orphan is left behind.

    Args:
        command: Executable name or path
        args: Command arguments
        timeout: Timeout in seconds
        cwd: Working directory for the child

    Returns:
        ProcessResult with decoded output

    Raises:
        BackendError: If command times out or executable not found
    """
    cmd = build_command(command, args)
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise BackendError(
            error_code="not_found",
            message=f"Executable not found: {cmd[0]} ({e})",
            recoverable=False,
        )
    except OSError as e:
        raise BackendError(
            error_code="execution_error",
            message=f"Failed to run {cmd[0]}: {e}",
            recoverable=False,
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            proc.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise BackendError(
            error_code="timeout",
            message=f"Command {cmd[0]} timed out after {timeout}s",
            recoverable=True,
        )
    except asyncio.CancelledError:
        proc.kill()
        await proc.wait()
        raise

    return ProcessResult(
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        return_code=proc.returncode or 0,
    )
