"""
Relevance ranking for forum search results.

Additive point system, one inspectable bonus per signal:

    Version match     +100 when the title's version equals the target
    Priority tag      +50 per tag found in the title
    Query word        +20 per query word found in the title
    Recency           up to +30, linear decay to 0 at 30 days
    Engagement        +1 per 10 engagement points

Scores are uncapped and not normalized.
"""

import math
from datetime import datetime, timezone
from typing import Iterable, Optional

from core.versions import detect_version
from models.search import RankedResult, RankingContext, SearchCandidate

__all__ = [
    "VERSION_MATCH_BONUS",
    "TAG_MATCH_BONUS",
    "QUERY_WORD_BONUS",
    "RECENCY_WINDOW_DAYS",
    "score_candidate",
    "rank_results",
]

# ══════════════════════════════════════════════════════════════════════════════
# Scoring Weights
# ══════════════════════════════════════════════════════════════════════════════

VERSION_MATCH_BONUS = 100
TAG_MATCH_BONUS = 50
QUERY_WORD_BONUS = 20
RECENCY_WINDOW_DAYS = 30
ENGAGEMENT_DIVISOR = 10

SECONDS_PER_DAY = 86400.0

# ══════════════════════════════════════════════════════════════════════════════
# Scorer
# ══════════════════════════════════════════════════════════════════════════════


def _version_bonus(detected: Optional[str], target: Optional[str]) -> int:
    if detected and target and detected.lower() == target.lower():
        return VERSION_MATCH_BONUS
    return 0


def _recency_bonus(timestamp: datetime, now: datetime) -> int:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    days = max(0.0, (now - timestamp).total_seconds() / SECONDS_PER_DAY)
    if days < RECENCY_WINDOW_DAYS:
        return math.floor(RECENCY_WINDOW_DAYS - days)
    return 0


def score_candidate(
    candidate: SearchCandidate,
    context: RankingContext,
    now: datetime,
    *,
    detected_version: Optional[str] = None,
) -> tuple[int, list[str]]:
    """
    Score one candidate against a ranking context.

    Args:
        candidate: The result to score
        context: Query, target version and priority tags
        now: Reference instant, captured once per ranking pass
        detected_version: Version already detected from the title (detected
            here when omitted)

    Returns:
        (relevance score, priority tags matched in the title)
    """
    title = candidate.title.lower()
    if detected_version is None:
        detected_version = detect_version(candidate.title)

    score = _version_bonus(detected_version, context.target_version)

    matched_tags: list[str] = []
    for tag in dict.fromkeys(context.priority_tags):
        if tag and tag in title:
            score += TAG_MATCH_BONUS
            matched_tags.append(tag)

    for word in context.query_words:
        if word in title:
            score += QUERY_WORD_BONUS

    score += _recency_bonus(candidate.timestamp, now)
    score += math.floor(candidate.engagement_score / ENGAGEMENT_DIVISOR)

    return score, matched_tags


# ══════════════════════════════════════════════════════════════════════════════
# Ranking Engine
# ══════════════════════════════════════════════════════════════════════════════


def rank_results(
    candidates: Iterable[SearchCandidate],
    context: RankingContext,
    now: Optional[datetime] = None,
) -> list[RankedResult]:
    """
    Score every candidate and order by relevance, highest first.

    The sort is stable: equal scores keep their input order. The full list
    is returned; callers truncate to their own top-N.

    Example:
        >>> ranked = rank_results(candidates, RankingContext("routing error", "v13"))
        >>> top = ranked[:5]
    """
    if now is None:
        now = datetime.now(timezone.utc)

    ranked: list[RankedResult] = []
    for candidate in candidates:
        detected = detect_version(candidate.title)
        score, matched = score_candidate(
            candidate, context, now, detected_version=detected
        )
        ranked.append(
            RankedResult(
                candidate=candidate,
                relevance_score=score,
                matched_tags=tuple(matched),
                detected_version=detected,
            )
        )

    # Stable: ties keep input order.
    return sorted(ranked, key=lambda r: -r.relevance_score)
