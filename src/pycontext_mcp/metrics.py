"""Per-workspace metrics collection and tracking.

This module provides infrastructure for collecting performance metrics for
each workspace, including operation counts, latencies, and error tracking.
"""

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path

# Operations recorded by the MCP tools
OPERATIONS = ("resolve", "version", "packages", "tool_probe")


@dataclass
class OperationStats:
    """Count, latencies (milliseconds) and errors for one operation."""

    count: int = 0
    times: list[float] = field(default_factory=list)
    errors: int = 0

    def avg_ms(self) -> float:
        return sum(self.times) / len(self.times) if self.times else 0.0

    def to_dict(self) -> dict:
        return {"count": self.count, "avg_ms": self.avg_ms(), "errors": self.errors}


@dataclass
class WorkspaceMetrics:
    """Metrics for a single workspace.

    Tracks per-operation counts, latencies, and errors across all operations.
    All latency times are stored as milliseconds.
    """

    workspace_root: Path
    operations: dict[str, OperationStats] = field(
        default_factory=lambda: {name: OperationStats() for name in OPERATIONS}
    )

    def to_dict(self) -> dict:
        """Convert metrics to dictionary format.

        Returns:
            Dictionary representation of metrics suitable for JSON serialization
        """
        return {
            "workspace": str(self.workspace_root),
            "operations": {
                name: stats.to_dict() for name, stats in self.operations.items()
            },
        }


class MetricsCollector:
    """Metrics collector for multiple workspaces.

    Uses asyncio.Lock because records arrive from concurrent tool calls on
    the event loop.
    """

    def __init__(self) -> None:
        self._metrics: dict[Path, WorkspaceMetrics] = {}
        self._start_time = time.time()
        self._lock = asyncio.Lock()

    async def record(
        self,
        workspace_root: Path,
        operation: str,
        duration_ms: float,
        success: bool,
    ) -> None:
        """Record metrics for an operation.

        Args:
            workspace_root: Root path of the workspace
            operation: Operation name (resolve, version, packages, tool_probe)
            duration_ms: Duration in milliseconds
            success: Whether the operation succeeded

        Raises:
            ValueError: If operation is not a valid operation name
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Invalid operation: {operation}")

        async with self._lock:
            if workspace_root not in self._metrics:
                self._metrics[workspace_root] = WorkspaceMetrics(workspace_root)

            stats = self._metrics[workspace_root].operations[operation]
            stats.count += 1
            stats.times.append(duration_ms)
            if not success:
                stats.errors += 1

    def get_workspace_metrics(self, workspace_root: Path) -> WorkspaceMetrics | None:
        return self._metrics.get(workspace_root)

    def get_all_metrics(self) -> list[WorkspaceMetrics]:
        return list(self._metrics.values())

    def uptime_seconds(self) -> float:
        return time.time() - self._start_time


_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the process-wide metrics collector (created on first call)."""
    global _collector
    if _collector is None:
        _collector = MetricsCollector()
    return _collector


def reset_metrics_collector() -> None:
    """Reset the metrics collector (for testing only)."""
    global _collector
    _collector = None
