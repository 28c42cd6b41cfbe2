"""
Umbraco Forum (Discourse) API.

Typed access to the public JSON endpoints every Discourse instance exposes:

    search.json        posts + topics matching a query
    latest.json        most recently active topics
    t/{id}.json        one topic with its post stream
    categories.json    forum sections

Failures raise the forum error taxonomy instead of returning empty lists,
so callers can tell "no results" apart from "request failed".
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from core.errors import ForumPayloadError, ForumTimeoutError, ForumTransportError
from core.metrics import get_api_metrics
from models.forum import (
    ForumCategoriesResponse,
    ForumCategoryDetail,
    ForumLatestResponse,
    ForumSearchResponse,
    ForumTopic,
    ForumTopicDetail,
)
from models.search import ResultSource, SearchCandidate

__all__ = [
    "search",
    "get_topic",
    "get_latest",
    "get_categories",
    "topic_url",
    "to_candidates",
    "DEFAULT_FORUM",
    "API_TIMEOUT",
]

# ══════════════════════════════════════════════════════════════════════════════
# Configuration
# ══════════════════════════════════════════════════════════════════════════════

API_TIMEOUT = 30.0
DEFAULT_FORUM = "https://forum.umbraco.com"
METRICS_SOURCE = "forum"

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

# ══════════════════════════════════════════════════════════════════════════════
# Transport
# ══════════════════════════════════════════════════════════════════════════════


async def _fetch(client: httpx.AsyncClient, url: str, params: Optional[dict[str, Any]]) -> Any:
    metrics = get_api_metrics(METRICS_SOURCE)
    start = time.time()
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as e:
        metrics.record_failure("timeout")
        logger.warning(f"Forum request timed out: {url}")
        raise ForumTimeoutError(str(e)) from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        metrics.record_failure(f"http_{status}")
        logger.warning(f"Forum HTTP error {status}: {url}")
        raise ForumTransportError(
            f"HTTP {status} from {url}", status_code=status
        ) from e
    except httpx.HTTPError as e:
        metrics.record_failure(type(e).__name__)
        logger.warning(f"Forum request failed: {url}: {e}")
        raise ForumTransportError(str(e)) from e
    except ValueError as e:
        metrics.record_failure("invalid_json")
        logger.warning(f"Forum returned invalid JSON: {url}")
        raise ForumPayloadError("Response was not valid JSON") from e

    metrics.record_success((time.time() - start) * 1000)
    return data


async def _get_json(
    path: str,
    *,
    params: Optional[dict[str, Any]] = None,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = API_TIMEOUT,
) -> Any:
    url = f"{(base_url or DEFAULT_FORUM).rstrip('/')}/{path.lstrip('/')}"
    if client is not None:
        return await _fetch(client, url, params)
    async with httpx.AsyncClient(timeout=timeout) as owned:
        return await _fetch(owned, url, params)


def _parse(model: type[PayloadT], data: Any) -> PayloadT:
    if not isinstance(data, dict):
        raise ForumPayloadError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ForumPayloadError(f"Unexpected {model.__name__} shape") from e


# ══════════════════════════════════════════════════════════════════════════════
# Endpoints
# ══════════════════════════════════════════════════════════════════════════════


async def search(
    query: str,
    *,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = API_TIMEOUT,
) -> ForumSearchResponse:
    """
    Search the forum.

    Args:
        query: Search query string (URL-encoded by httpx)
        base_url: Forum root (defaults to the Umbraco forum)
        client: Shared client; a short-lived one is opened when omitted
        timeout: Per-call timeout in seconds

    Returns:
        Parsed search payload with parallel posts and topics lists

    Example:
        >>> response = await search("content picker v13")
        >>> [t.display_title for t in response.topics]
    """
    data = await _get_json(
        "search.json",
        params={"q": query},
        base_url=base_url,
        client=client,
        timeout=timeout,
    )
    return _parse(ForumSearchResponse, data)


async def get_topic(
    topic_id: int,
    *,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = API_TIMEOUT,
) -> ForumTopicDetail:
    """Fetch one topic with its post stream."""
    data = await _get_json(
        f"t/{topic_id}.json", base_url=base_url, client=client, timeout=timeout
    )
    return _parse(ForumTopicDetail, data)


async def get_latest(
    *,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = API_TIMEOUT,
) -> list[ForumTopic]:
    """Fetch the most recently active topics."""
    data = await _get_json(
        "latest.json", base_url=base_url, client=client, timeout=timeout
    )
    latest = _parse(ForumLatestResponse, data)
    if latest.topic_list is None:
        raise ForumPayloadError("Missing topic_list in latest topics")
    return latest.topic_list.topics


async def get_categories(
    *,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = API_TIMEOUT,
) -> list[ForumCategoryDetail]:
    """Fetch forum categories."""
    data = await _get_json(
        "categories.json", base_url=base_url, client=client, timeout=timeout
    )
    categories = _parse(ForumCategoriesResponse, data)
    if categories.category_list is None:
        raise ForumPayloadError("Missing category_list in categories")
    return categories.category_list.categories


# ══════════════════════════════════════════════════════════════════════════════
# Normalization
# ══════════════════════════════════════════════════════════════════════════════


def topic_url(topic: ForumTopic, base_url: Optional[str] = None) -> str:
    return f"{(base_url or DEFAULT_FORUM).rstrip('/')}/t/{topic.slug}/{topic.id}"


def to_candidates(
    response: ForumSearchResponse,
    *,
    base_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> list[SearchCandidate]:
    """
    Turn the topics of a search payload into ranking candidates.

    The preview names the author of each topic's opening post; topics with no
    timestamp at all are stamped with `now`.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    candidates = []
    for topic in response.topics:
        author = response.author_of(topic.id)
        candidates.append(
            SearchCandidate(
                title=topic.display_title,
                url=topic_url(topic, base_url),
                preview=(
                    f"👤 Author: {author} · 👁 {topic.views} views · "
                    f"💬 {topic.reply_count} replies · ❤ {topic.like_count} likes"
                ),
                timestamp=topic.last_activity or now,
                engagement_score=topic.engagement_score,
                source=ResultSource.FORUM,
            )
        )
    return candidates
