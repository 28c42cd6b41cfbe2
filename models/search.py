"""Search candidates, ranking context and aggregated results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

__all__ = [
    "ResultSource",
    "SearchCandidate",
    "RankingContext",
    "RankedResult",
    "AggregatedResult",
    "parse_priority_tags",
]


class ResultSource(str, Enum):
    """Where a result came from."""

    FORUM = "Forum"
    DOCS = "Docs"
    GITHUB = "GitHub"


@dataclass(frozen=True)
class SearchCandidate:
    """One normalized search result before ranking."""

    title: str
    url: str
    preview: str
    timestamp: datetime
    engagement_score: int = 0
    source: ResultSource = ResultSource.FORUM

    def __post_init__(self):
        if not self.url:
            raise ValueError("SearchCandidate.url must not be empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "preview": self.preview,
            "timestamp": self.timestamp.isoformat(),
            "engagement_score": self.engagement_score,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class RankingContext:
    """Caller-supplied ranking inputs for one query."""

    query: str
    target_version: Optional[str] = None
    priority_tags: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "priority_tags", tuple(t.lower() for t in self.priority_tags)
        )

    @property
    def query_words(self) -> list[str]:
        return self.query.lower().split()


@dataclass(frozen=True)
class RankedResult:
    """A candidate plus its derived score, matched tags and detected version."""

    candidate: SearchCandidate
    relevance_score: int
    matched_tags: tuple[str, ...] = ()
    detected_version: Optional[str] = None

    @property
    def title(self) -> str:
        return self.candidate.title

    @property
    def url(self) -> str:
        return self.candidate.url

    @property
    def preview(self) -> str:
        return self.candidate.preview

    @property
    def timestamp(self) -> datetime:
        return self.candidate.timestamp

    @property
    def source(self) -> ResultSource:
        return self.candidate.source

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.candidate.to_dict(),
            "relevance_score": self.relevance_score,
            "matched_tags": list(self.matched_tags),
            "detected_version": self.detected_version,
        }


@dataclass
class AggregatedResult:
    """Per-source result slots; an empty slot means that source yielded nothing."""

    forum: list[RankedResult] = field(default_factory=list)
    docs: list[SearchCandidate] = field(default_factory=list)
    github: list[SearchCandidate] = field(default_factory=list)

    def slots(self) -> list[tuple[ResultSource, list]]:
        """Slots in fixed Forum, Docs, GitHub order."""
        return [
            (ResultSource.FORUM, self.forum),
            (ResultSource.DOCS, self.docs),
            (ResultSource.GITHUB, self.github),
        ]

    @property
    def total(self) -> int:
        return len(self.forum) + len(self.docs) + len(self.github)

    def to_dict(self) -> dict[str, Any]:
        return {
            source.value.lower(): [item.to_dict() for item in items]
            for source, items in self.slots()
        }


def parse_priority_tags(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated tag list into trimmed, lower-cased tags."""
    if not raw:
        return ()
    return tuple(t.strip().lower() for t in raw.split(",") if t.strip())
