"""
Multi-source fan-out search.

Queries the forum, the official docs and GitHub concurrently. Each source
runs as its own task and resolves to its own slot, so a failing source only
empties its slot; the other two are unaffected.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from api import discourse, docs, github
from core.metrics import get_api_metrics
from core.ranking import rank_results
from models.config import ForumSettings
from models.search import AggregatedResult, RankingContext, ResultSource

__all__ = ["aggregate_sources", "enhance_query"]

logger = logging.getLogger(__name__)


def enhance_query(query: str, version: Optional[str]) -> str:
    """Append the version to the forum query when one is given."""
    return f"{query} {version}" if version else query


async def _forum_branch(
    query: str,
    version: Optional[str],
    settings: ForumSettings,
    client: Optional[httpx.AsyncClient],
    now: datetime,
) -> list:
    response = await discourse.search(
        enhance_query(query, version),
        base_url=settings.forum_root,
        client=client,
        timeout=settings.api_timeout,
    )
    candidates = discourse.to_candidates(
        response, base_url=settings.forum_root, now=now
    )
    context = RankingContext(query=query, target_version=version)
    return rank_results(candidates, context, now)[: settings.aggregate_forum_limit]


async def _timed(source: ResultSource, branch: Any) -> list:
    start = time.time()
    result = await branch
    get_api_metrics(f"aggregate:{source.value.lower()}").record_success(
        (time.time() - start) * 1000
    )
    return result


async def aggregate_sources(
    query: str,
    version: Optional[str] = None,
    *,
    settings: Optional[ForumSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> AggregatedResult:
    """
    Search Forum, Docs and GitHub concurrently.

    Args:
        query: Search query
        version: Optional version hint, appended to the forum query and used
            as the ranking target
        settings: Endpoints and limits
        client: Shared HTTP client for the forum branch
        now: Reference instant for recency scoring

    Returns:
        AggregatedResult with Forum, Docs and GitHub slots. A source that
        failed leaves its slot empty; this never raises for branch failures.
        Cancelling the caller cancels every branch and propagates.
    """
    settings = settings or ForumSettings()
    now = now or datetime.now(timezone.utc)

    branches = {
        ResultSource.FORUM: _forum_branch(query, version, settings, client, now),
        ResultSource.DOCS: docs.search(
            query,
            version,
            base_url=settings.docs_root,
            product_name=settings.product_name,
            now=now,
        ),
        ResultSource.GITHUB: github.search(
            query,
            repo=settings.github_repo,
            product_name=settings.product_name,
            now=now,
        ),
    }

    outcomes = await asyncio.gather(
        *(_timed(source, branch) for source, branch in branches.items()),
        return_exceptions=True,
    )

    slots: dict[ResultSource, list] = {}
    for source, outcome in zip(branches, outcomes):
        if isinstance(outcome, (Exception, asyncio.CancelledError)):
            get_api_metrics(f"aggregate:{source.value.lower()}").record_failure(
                type(outcome).__name__
            )
            logger.warning(f"{source.value} branch failed: {type(outcome).__name__}: {outcome}")
            slots[source] = []
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            slots[source] = outcome

    return AggregatedResult(
        forum=slots[ResultSource.FORUM],
        docs=slots[ResultSource.DOCS],
        github=slots[ResultSource.GITHUB],
    )
