"""
Data models for the Umbraco Forum MCP.

Provides Pydantic models for tool input validation, typed forum payloads,
and the candidate/result types that flow through ranking and aggregation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.config import ForumSettings, ResponseFormat, load_settings
from models.search import (
    AggregatedResult,
    RankedResult,
    RankingContext,
    ResultSource,
    SearchCandidate,
    parse_priority_tags,
)

__all__ = [
    "ResponseFormat",
    "ForumSettings",
    "load_settings",
    "ResultSource",
    "SearchCandidate",
    "RankingContext",
    "RankedResult",
    "AggregatedResult",
    "parse_priority_tags",
    "SearchInput",
    "SmartSearchInput",
    "AllSourcesInput",
    "MonitorInput",
    "TopicInput",
    "LatestTopicsInput",
    "DraftPostInput",
    "ShouldPostInput",
    "OptimizeTitleInput",
]

# ══════════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════════


class _ToolInput(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


def _require_text(value: Optional[str], label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{label} cannot be empty.")
    return value.strip()


class SearchInput(_ToolInput):
    """Input model for the plain forum search."""

    query: str = Field(
        ...,
        description="The search query (e.g., '404 custom API Umbraco 13')",
        max_length=500,
    )

    @field_validator("query", mode="before")
    @classmethod
    def validate_query(cls, v: Optional[str]) -> str:
        return _require_text(v, "Search query")


class SmartSearchInput(SearchInput):
    """Input model for version- and tag-aware ranked search."""

    version: Optional[str] = Field(
        default=None,
        description="Your Umbraco version (e.g., 'v13', 'v14', 'v17')",
        max_length=30,
    )

    priority_tags: Optional[str] = Field(
        default=None,
        description="Comma-separated tags to prioritize (e.g., 'API,Routing')",
        max_length=300,
    )

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' (default) or 'json'",
    )

    @property
    def tags(self) -> tuple[str, ...]:
        return parse_priority_tags(self.priority_tags)


class AllSourcesInput(SearchInput):
    """Input model for the forum/docs/GitHub fan-out search."""

    version: Optional[str] = Field(
        default=None,
        description="Your Umbraco version (optional)",
        max_length=30,
    )

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' (default) or 'json'",
    )


class MonitorInput(_ToolInput):
    """Input model for recent-activity monitoring."""

    topic_filter: str = Field(
        ...,
        description="Topic to monitor (e.g., 'API', 'v14', 'Deploy')",
        max_length=200,
    )

    hours_back: int = Field(
        default=24,
        description="Hours to look back (default 24)",
        ge=1,
        le=720,
    )

    @field_validator("topic_filter", mode="before")
    @classmethod
    def validate_filter(cls, v: Optional[str]) -> str:
        return _require_text(v, "Topic filter")


class TopicInput(_ToolInput):
    topic_id: int = Field(..., description="Forum topic ID", gt=0)


class LatestTopicsInput(_ToolInput):
    limit: int = Field(default=5, description="Number of topics (default 5, max 10)")

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        if v < 1:
            return 5
        return min(v, 10)


class DraftPostInput(_ToolInput):
    """Input model for drafting a new forum post."""

    issue: str = Field(..., description="The issue/error you're experiencing", max_length=2000)
    version: str = Field(..., description="Your Umbraco version (e.g., 'v13')", max_length=30)
    error_message: Optional[str] = Field(default=None, max_length=5000)
    attempted_solutions: Optional[str] = Field(default=None, max_length=5000)
    code_snippet: Optional[str] = Field(default=None, max_length=10000)
    tags: Optional[str] = Field(default=None, max_length=300)

    @field_validator("issue", mode="before")
    @classmethod
    def validate_issue(cls, v: Optional[str]) -> str:
        return _require_text(v, "Issue description")

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Optional[str]) -> str:
        return _require_text(v, "Version")


class ShouldPostInput(_ToolInput):
    issue: str = Field(..., description="Your issue description", max_length=2000)
    results_found: int = Field(..., description="Number of relevant results found", ge=0)
    results_helpful: str = Field(..., description="Are existing results helpful? (yes/no/somewhat)")

    @field_validator("results_helpful")
    @classmethod
    def lower_helpful(cls, v: str) -> str:
        return v.lower()


class OptimizeTitleInput(_ToolInput):
    draft_title: str = Field(..., description="Your draft title", max_length=500)
    version: str = Field(..., description="Your Umbraco version", max_length=30)

    @field_validator("draft_title", mode="before")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _require_text(v, "Draft title")
