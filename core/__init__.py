"""
Core logic for the Umbraco Forum MCP.

    Versions      Detect and normalize Umbraco version tokens
    Ranking       Score and order forum results for a version and tags
    Aggregation   Concurrent Forum + Docs + GitHub fan-out
    Monitoring    Filter recent topic activity
    Drafting      Forum post drafts and title advice
    Metrics       Performance monitoring and reporting
"""

from core.aggregator import aggregate_sources, enhance_query
from core.errors import (
    ForumError,
    ForumPayloadError,
    ForumTimeoutError,
    ForumTransportError,
    QueryValidationError,
)
from core.metrics import (
    APIMetrics,
    PerformanceMonitor,
    format_metrics_report,
    get_api_metrics,
    get_performance_monitor,
    reset_metrics,
)
from core.monitor import filter_recent_topics
from core.ranking import rank_results, score_candidate
from core.versions import KNOWN_VERSIONS, detect_version, normalize_version

__all__ = [
    # Errors
    "ForumError",
    "QueryValidationError",
    "ForumTransportError",
    "ForumTimeoutError",
    "ForumPayloadError",
    # Versions
    "KNOWN_VERSIONS",
    "detect_version",
    "normalize_version",
    # Ranking
    "score_candidate",
    "rank_results",
    # Aggregation
    "aggregate_sources",
    "enhance_query",
    # Monitoring
    "filter_recent_topics",
    # Metrics
    "APIMetrics",
    "PerformanceMonitor",
    "get_api_metrics",
    "get_performance_monitor",
    "reset_metrics",
    "format_metrics_report",
]
