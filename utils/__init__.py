"""
Rendering and text helpers.

All utilities are stateless and lightweight.
"""

from utils.formatting import (
    NO_RESULTS,
    SEPARATOR,
    format_aggregated_results,
    format_aggregated_results_json,
    format_categories,
    format_date,
    format_error,
    format_latest_topics,
    format_monitor_results,
    format_search_results,
    format_smart_results,
    format_smart_results_json,
    format_topic_details,
)
from utils.html import CodeSnippet, extract_code_blocks, truncate

__all__ = [
    # HTML
    "CodeSnippet",
    "extract_code_blocks",
    "truncate",
    # Formatting
    "NO_RESULTS",
    "SEPARATOR",
    "format_date",
    "format_error",
    "format_search_results",
    "format_smart_results",
    "format_smart_results_json",
    "format_aggregated_results",
    "format_aggregated_results_json",
    "format_monitor_results",
    "format_topic_details",
    "format_latest_topics",
    "format_categories",
]
