"""Recent forum activity filtering."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from models.forum import ForumTopic

__all__ = ["filter_recent_topics"]


def filter_recent_topics(
    topics: Iterable[ForumTopic],
    topic_filter: str,
    hours_back: int = 24,
    now: Optional[datetime] = None,
) -> list[ForumTopic]:
    """
    Keep topics active within the window whose title mentions the filter.

    Topics with no timestamp are dropped. Result is newest activity first;
    an empty list means no recent activity, not a failure.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=hours_back)

    recent = [
        topic
        for topic in topics
        if topic.last_activity is not None
        and topic.last_activity >= cutoff
        and topic.matches_text(topic_filter)
    ]
    return sorted(recent, key=lambda t: t.last_activity, reverse=True)
