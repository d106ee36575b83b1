"""Process execution backends for interpreter and tool probes."""

from .base import BackendError, ProcessResult, ProcessRunner
from .process import SubprocessRunner, build_command, run_process_async

__all__ = [
    "BackendError",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "build_command",
    "run_process_async",
]
