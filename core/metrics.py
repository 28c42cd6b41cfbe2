"""
Performance monitoring and metrics.

Track forum API call outcomes per endpoint and tool invocation timings.
"""

import time
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "APIMetrics",
    "PerformanceMonitor",
    "get_api_metrics",
    "get_performance_monitor",
    "reset_metrics",
    "format_metrics_report",
]

# ══════════════════════════════════════════════════════════════════════════════
# Metrics Classes
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class APIMetrics:
    """Track call statistics for one upstream source."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_latency_ms: float = 0.0
    error_types: dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        if self.total_calls == 0:
            return 0.0
        return (self.successful_calls / self.total_calls) * 100

    @property
    def avg_latency_ms(self) -> float:
        if self.successful_calls == 0:
            return 0.0
        return self.total_latency_ms / self.successful_calls

    def record_success(self, latency_ms: float):
        self.total_calls += 1
        self.successful_calls += 1
        self.total_latency_ms += latency_ms

    def record_failure(self, error_type: str):
        self.total_calls += 1
        self.failed_calls += 1
        self.error_types[error_type] = self.error_types.get(error_type, 0) + 1


@dataclass
class PerformanceMonitor:
    """Track tool invocations across the server's lifetime."""

    start_time: float = field(default_factory=time.time)
    tool_times: dict[str, list[float]] = field(default_factory=dict)
    empty_results: int = 0
    total_results: int = 0

    def record_tool(self, tool_name: str, duration_seconds: float, result_count: int = 0):
        self.tool_times.setdefault(tool_name, []).append(duration_seconds)
        self.total_results += result_count
        if result_count == 0:
            self.empty_results += 1

    @property
    def total_calls(self) -> int:
        return sum(len(times) for times in self.tool_times.values())

    def avg_time_ms(self, tool_name: str) -> float:
        times = self.tool_times.get(tool_name) or []
        if not times:
            return 0.0
        return (sum(times) / len(times)) * 1000

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time

    def summary(self) -> dict[str, Any]:
        return {
            "uptime_seconds": round(self.uptime_seconds, 1),
            "total_calls": self.total_calls,
            "empty_results": self.empty_results,
            "total_results": self.total_results,
            "avg_time_ms": {
                name: round(self.avg_time_ms(name), 0) for name in sorted(self.tool_times)
            },
        }


# ══════════════════════════════════════════════════════════════════════════════
# Global Instances
# ══════════════════════════════════════════════════════════════════════════════

_api_metrics: dict[str, APIMetrics] = {}
_perf_monitor = PerformanceMonitor()


def get_api_metrics(source: str) -> APIMetrics:
    """Get or create the metrics bucket for a source."""
    if source not in _api_metrics:
        _api_metrics[source] = APIMetrics()
    return _api_metrics[source]


def get_performance_monitor() -> PerformanceMonitor:
    return _perf_monitor


def reset_metrics() -> None:
    global _perf_monitor
    _api_metrics.clear()
    _perf_monitor = PerformanceMonitor()


def format_metrics_report() -> str:
    """Generate human-readable metrics report."""
    perf = _perf_monitor

    lines = [
        "# 📊 Performance Metrics",
        "",
        "## Tools",
        f"- Uptime: {perf.uptime_seconds:.0f}s",
        f"- Total Calls: {perf.total_calls}",
        f"- Empty Results: {perf.empty_results}",
    ]
    for name in sorted(perf.tool_times):
        lines.append(
            f"- {name}: {len(perf.tool_times[name])} call(s), "
            f"avg {perf.avg_time_ms(name):.0f}ms"
        )

    if not _api_metrics:
        lines.extend(["", "## Upstream", "- No upstream calls yet."])
        return "\n".join(lines)

    lines.extend(["", "## Upstream"])
    for source in sorted(_api_metrics):
        api = _api_metrics[source]
        lines.append(
            f"- **{source}**: {api.total_calls} call(s), "
            f"{api.success_rate:.1f}% success, avg {api.avg_latency_ms:.0f}ms"
        )
        for err, count in sorted(api.error_types.items(), key=lambda x: -x[1]):
            lines.append(f"  - {err}: {count}")

    return "\n".join(lines)
