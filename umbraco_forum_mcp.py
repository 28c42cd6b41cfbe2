#!/usr/bin/env python3
"""
Umbraco Forum MCP Server

An MCP server over the Umbraco community forum (Discourse). Finds discussions
ranked for your Umbraco version, fans out to the official docs and GitHub,
watches for new activity on a topic, and helps draft a good post when the
community hasn't answered your question yet.

Features:
- Version- and tag-aware ranked forum search
- Concurrent Forum + Docs + GitHub search that survives a failing source
- Recent-activity monitor for any keyword or version
- Topic reader with code snippet extraction
- Post drafting, posting advice and title optimization
"""

import logging
import os
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, ValidationError

from api import discourse
from core import (
    ForumError,
    QueryValidationError,
    aggregate_sources,
    enhance_query,
    filter_recent_topics,
    format_metrics_report,
    get_performance_monitor,
    normalize_version,
    rank_results,
)
from core import drafting
from models import (
    AllSourcesInput,
    DraftPostInput,
    LatestTopicsInput,
    MonitorInput,
    OptimizeTitleInput,
    RankingContext,
    ResponseFormat,
    SearchInput,
    ShouldPostInput,
    SmartSearchInput,
    TopicInput,
    load_settings,
)
from utils import (
    format_aggregated_results,
    format_aggregated_results_json,
    format_categories,
    format_error,
    format_latest_topics,
    format_monitor_results,
    format_search_results,
    format_smart_results,
    format_smart_results_json,
    format_topic_details,
)

# Load environment variables from .env file
load_dotenv()

# stdout carries the MCP stdio protocol, so logs go to stderr
logging.basicConfig(
    stream=sys.stderr,
    level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SETTINGS = load_settings()

# Initialize MCP server
mcp = FastMCP("umbraco_forum_mcp")

READ_ONLY_REMOTE = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}
LIVE_FEED = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}
READ_ONLY_LOCAL = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,
}


# ============================================================================
# Helpers
# ============================================================================


def _validate(model: type[BaseModel], **values):
    """Build a tool input model, turning pydantic errors into a readable message."""
    try:
        return model(**values)
    except ValidationError as e:
        error = e.errors()[0]
        message = error["msg"]
        if message.startswith("Value error, "):
            raise QueryValidationError(message[len("Value error, "):]) from e
        field = ".".join(str(part) for part in error["loc"]) or model.__name__
        raise QueryValidationError(f"Invalid {field}: {message}.") from e


def _record(tool_name: str, start: float, result_count: int = 0):
    get_performance_monitor().record_tool(tool_name, time.time() - start, result_count)


# ============================================================================
# Search Tools
# ============================================================================


@mcp.tool(
    name="smart_search_forum",
    annotations={"title": "Smart Forum Search", **READ_ONLY_REMOTE},
)
async def smart_search_forum(
    query: str,
    version: Optional[str] = None,
    priority_tags: Optional[str] = None,
    response_format: str = "markdown",
) -> str:
    """
    Intelligent search that ranks results based on your Umbraco version and context.

    Better than the basic search for targeted results. Each topic is scored on
    version match, priority tags in the title, query words in the title,
    recency and engagement; the top 5 are returned.

    Args:
        query: Your search query (e.g., 'API 404 error')
        version: Your Umbraco version (e.g., 'v13', 'v14', 'v17')
        priority_tags: Comma-separated tags to prioritize (e.g., 'API,Routing,Controllers')
        response_format: 'markdown' (default) or 'json'

    Returns:
        str: Ranked results, a "❌ No results found" message, or "Error: ..."
    """
    start = time.time()
    now = datetime.now(timezone.utc)
    try:
        params = _validate(
            SmartSearchInput,
            query=query,
            version=version,
            priority_tags=priority_tags,
            response_format=response_format,
        )
        target = normalize_version(params.version)
        response = await discourse.search(
            enhance_query(params.query, target),
            base_url=SETTINGS.forum_root,
            timeout=SETTINGS.api_timeout,
        )
    except ForumError as e:
        _record("smart_search_forum", start)
        return format_error(e.describe())

    candidates = discourse.to_candidates(response, base_url=SETTINGS.forum_root, now=now)
    context = RankingContext(
        query=params.query, target_version=target, priority_tags=params.tags
    )
    ranked = rank_results(candidates, context, now)[: SETTINGS.smart_search_limit]
    logger.info(f"smart_search_forum: {len(candidates)} candidates, {len(ranked)} kept")

    _record("smart_search_forum", start, len(ranked))
    if params.response_format == ResponseFormat.JSON:
        return format_smart_results_json(ranked, params.query, target)
    return format_smart_results(ranked, params.query, target)


@mcp.tool(
    name="search_all_sources",
    annotations={"title": "Search Forum, Docs and GitHub", **READ_ONLY_REMOTE},
)
async def search_all_sources(
    query: str,
    version: Optional[str] = None,
    response_format: str = "markdown",
) -> str:
    """
    Search across the Umbraco forum, official docs, and GitHub repositories.

    The three sources are queried concurrently. A source that fails leaves
    its section empty; the others are still returned.

    Args:
        query: Your search query
        version: Your Umbraco version (optional)
        response_format: 'markdown' (default) or 'json'

    Returns:
        str: Results grouped as Forum, Docs, GitHub
    """
    start = time.time()
    now = datetime.now(timezone.utc)
    try:
        params = _validate(
            AllSourcesInput, query=query, version=version, response_format=response_format
        )
    except QueryValidationError as e:
        _record("search_all_sources", start)
        return format_error(e.describe())

    results = await aggregate_sources(
        params.query, normalize_version(params.version), settings=SETTINGS, now=now
    )

    _record("search_all_sources", start, results.total)
    if params.response_format == ResponseFormat.JSON:
        return format_aggregated_results_json(results, params.query)
    return format_aggregated_results(results, params.query)


@mcp.tool(
    name="monitor_forum_topics",
    annotations={"title": "Monitor Forum Topics", **LIVE_FEED},
)
async def monitor_forum_topics(topic_filter: str, hours_back: int = 24) -> str:
    """
    Get recent forum posts about specific topics or versions.

    Use this to stay updated on new issues and solutions.

    Args:
        topic_filter: Topic to monitor (e.g., 'API', 'v14', 'Deploy', 'ModelsBuilder')
        hours_back: Hours to look back (default 24, max 720)

    Returns:
        str: Matching topics, newest first, or a "✅ No new posts" message
    """
    start = time.time()
    now = datetime.now(timezone.utc)
    try:
        params = _validate(MonitorInput, topic_filter=topic_filter, hours_back=hours_back)
        topics = await discourse.get_latest(
            base_url=SETTINGS.forum_root, timeout=SETTINGS.api_timeout
        )
    except ForumError as e:
        _record("monitor_forum_topics", start)
        return format_error(e.describe())

    recent = filter_recent_topics(topics, params.topic_filter, params.hours_back, now)
    _record("monitor_forum_topics", start, len(recent))
    return format_monitor_results(
        recent, params.topic_filter, params.hours_back, SETTINGS.forum_root, now
    )


@mcp.tool(
    name="search_umbraco_forum",
    annotations={"title": "Search Umbraco Forum", **READ_ONLY_REMOTE},
)
async def search_umbraco_forum(query: str) -> str:
    """
    Search the Umbraco community forum for discussions, solutions, and answers.

    Returns the top 3 most relevant results by engagement.

    Args:
        query: The search query (e.g., '404 custom API Umbraco 13')

    Returns:
        str: Top discussions with links, or a "❌ No results found" message
    """
    start = time.time()
    try:
        params = _validate(SearchInput, query=query)
        response = await discourse.search(
            params.query, base_url=SETTINGS.forum_root, timeout=SETTINGS.api_timeout
        )
    except ForumError as e:
        _record("search_umbraco_forum", start)
        return format_error(e.describe())

    count = len(response.topics) or len(response.posts)
    _record("search_umbraco_forum", start, min(count, SETTINGS.plain_search_limit))
    return format_search_results(
        response, params.query, SETTINGS.forum_root, SETTINGS.plain_search_limit
    )


# ============================================================================
# Browsing Tools
# ============================================================================


@mcp.tool(
    name="get_forum_topic",
    annotations={"title": "Get Forum Topic", **READ_ONLY_REMOTE},
)
async def get_forum_topic(topic_id: int) -> str:
    """
    Get full details of a forum topic including replies and code snippets.

    Code from the accepted answer is listed separately from other examples.

    Args:
        topic_id: Forum topic ID (the number at the end of a topic URL)

    Returns:
        str: Topic summary, original post, top replies and code snippets
    """
    start = time.time()
    try:
        params = _validate(TopicInput, topic_id=topic_id)
        topic = await discourse.get_topic(
            params.topic_id, base_url=SETTINGS.forum_root, timeout=SETTINGS.api_timeout
        )
    except ForumError as e:
        _record("get_forum_topic", start)
        return format_error(e.describe())

    _record("get_forum_topic", start, len(topic.posts))
    return format_topic_details(topic, SETTINGS.forum_root)


@mcp.tool(
    name="get_latest_topics",
    annotations={"title": "Get Latest Forum Topics", **LIVE_FEED},
)
async def get_latest_topics(limit: int = 5) -> str:
    """
    Get the latest topics from the Umbraco forum.

    Args:
        limit: Number of topics to return (default 5, max 10)

    Returns:
        str: Most recently active topics
    """
    start = time.time()
    try:
        params = _validate(LatestTopicsInput, limit=limit)
        topics = await discourse.get_latest(
            base_url=SETTINGS.forum_root, timeout=SETTINGS.api_timeout
        )
    except ForumError as e:
        _record("get_latest_topics", start)
        return format_error(e.describe())

    shown = topics[: params.limit]
    _record("get_latest_topics", start, len(shown))
    return format_latest_topics(shown, SETTINGS.forum_root)


@mcp.tool(
    name="get_forum_categories",
    annotations={"title": "Get Forum Categories", **READ_ONLY_REMOTE},
)
async def get_forum_categories() -> str:
    """
    Get all forum categories to help focus your search.

    Returns:
        str: Categories ordered as on the forum, with topic counts and links
    """
    start = time.time()
    try:
        categories = await discourse.get_categories(
            base_url=SETTINGS.forum_root, timeout=SETTINGS.api_timeout
        )
    except ForumError as e:
        _record("get_forum_categories", start)
        return format_error(e.describe())

    _record("get_forum_categories", start, len(categories))
    return format_categories(categories, SETTINGS.forum_root)


# ============================================================================
# Drafting Tools
# ============================================================================


@mcp.tool(
    name="draft_forum_post",
    annotations={"title": "Draft Forum Post", **READ_ONLY_LOCAL},
)
async def draft_forum_post(
    issue: str,
    version: str,
    error_message: Optional[str] = None,
    attempted_solutions: Optional[str] = None,
    code_snippet: Optional[str] = None,
    tags: Optional[str] = None,
) -> str:
    """
    Draft a well-structured forum post when existing results don't solve your problem.

    Produces a title, suggested category, up to 5 tags and a Markdown body
    ready to paste into a new topic. Nothing is posted.

    Args:
        issue: The issue/error you're experiencing
        version: Your Umbraco version (e.g., 'v13')
        error_message: Error message if any
        attempted_solutions: What you've already tried
        code_snippet: Relevant code snippet
        tags: Comma-separated tags (e.g., 'API,Routing')
    """
    start = time.time()
    try:
        params = _validate(
            DraftPostInput,
            issue=issue,
            version=version,
            error_message=error_message,
            attempted_solutions=attempted_solutions,
            code_snippet=code_snippet,
            tags=tags,
        )
    except QueryValidationError as e:
        _record("draft_forum_post", start)
        return format_error(e.describe())

    _record("draft_forum_post", start, 1)
    return drafting.draft_forum_post(
        params.issue,
        normalize_version(params.version),
        error_message=params.error_message,
        attempted_solutions=params.attempted_solutions,
        code_snippet=params.code_snippet,
        tags=params.tags,
        forum_url=SETTINGS.forum_root,
    )


@mcp.tool(
    name="should_create_post",
    annotations={"title": "Should I Create a Post?", **READ_ONLY_LOCAL},
)
async def should_create_post(issue: str, results_found: int, results_helpful: str) -> str:
    """
    Analyze whether you should create a new forum post based on search results.

    Args:
        issue: Your issue description
        results_found: Number of relevant results found
        results_helpful: Are existing results helpful? (yes/no/somewhat)
    """
    start = time.time()
    try:
        params = _validate(
            ShouldPostInput,
            issue=issue,
            results_found=results_found,
            results_helpful=results_helpful,
        )
    except QueryValidationError as e:
        _record("should_create_post", start)
        return format_error(e.describe())

    _record("should_create_post", start, 1)
    return drafting.should_create_post(
        params.issue, params.results_found, params.results_helpful
    )


@mcp.tool(
    name="optimize_post_title",
    annotations={"title": "Optimize Post Title", **READ_ONLY_LOCAL},
)
async def optimize_post_title(draft_title: str, version: str) -> str:
    """
    Improve a forum post title so it gets found and answered.

    Args:
        draft_title: Your draft title
        version: Your Umbraco version
    """
    start = time.time()
    try:
        params = _validate(OptimizeTitleInput, draft_title=draft_title, version=version)
    except QueryValidationError as e:
        _record("optimize_post_title", start)
        return format_error(e.describe())

    _record("optimize_post_title", start, 1)
    return drafting.optimize_post_title(
        params.draft_title, normalize_version(params.version) or params.version
    )


@mcp.tool(
    name="get_performance_metrics",
    annotations={"title": "Get Performance Metrics", **READ_ONLY_LOCAL},
)
async def get_performance_metrics() -> str:
    """
    Get tool timings and upstream call statistics since the server started.

    Returns:
        str: Markdown report with per-tool and per-source statistics
    """
    return format_metrics_report()


def validate_environment():
    """Log the effective configuration on startup."""
    logger.info(f"Forum: {SETTINGS.forum_root}")
    logger.info(f"Docs: {SETTINGS.docs_root}")
    logger.info(f"GitHub: {SETTINGS.github_repo}")
    logger.info(f"Timeout: {SETTINGS.api_timeout}s")


# ============================================================================
# Main Entry Point
# ============================================================================


def main():
    validate_environment()
    mcp.run()


if __name__ == "__main__":
    main()
