"""Shared fixtures: a fixed clock, forum payload builders and a fake HTTP layer."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
import pytest

from core.metrics import reset_metrics

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
FORUM = "https://forum.example.test"


def iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def make_topic(
    topic_id: int = 1,
    title: str = "Content picker broken in v13",
    *,
    age: Optional[timedelta] = timedelta(days=1),
    views: int = 100,
    like_count: int = 5,
    reply_count: int = 3,
    fancy_title: Optional[str] = None,
    now: datetime = FIXED_NOW,
) -> dict[str, Any]:
    """Build a topic as it appears in search.json and latest.json."""
    topic = {
        "id": topic_id,
        "title": title,
        "fancy_title": fancy_title if fancy_title is not None else title,
        "slug": title.lower().replace(" ", "-"),
        "posts_count": reply_count + 1,
        "reply_count": reply_count,
        "views": views,
        "like_count": like_count,
        "category_id": 4,
        "created_at": None,
        "last_posted_at": None,
        "bumped_at": None,
    }
    if age is not None:
        topic["created_at"] = iso(now - age - timedelta(days=1))
        topic["last_posted_at"] = iso(now - age)
    return topic


def make_post(
    topic_id: int = 1,
    username: str = "alice",
    *,
    post_number: int = 1,
    like_count: int = 0,
    blurb: str = "Some text",
) -> dict[str, Any]:
    return {
        "id": topic_id * 100 + post_number,
        "name": username.title(),
        "username": username,
        "created_at": iso(FIXED_NOW - timedelta(days=2)),
        "like_count": like_count,
        "blurb": blurb,
        "post_number": post_number,
        "topic_id": topic_id,
    }


def make_search_payload(topics=(), posts=()) -> dict[str, Any]:
    return {
        "posts": list(posts),
        "topics": list(topics),
        "users": [],
        "categories": [],
        "tags": [],
        "grouped_search_result": {"term": "ignored"},
    }


def make_topic_detail(topic_id: int = 42, posts=()) -> dict[str, Any]:
    return {
        "id": topic_id,
        "title": "How do I register a custom API controller?",
        "slug": "how-do-i-register-a-custom-api-controller",
        "posts_count": len(posts),
        "views": 250,
        "like_count": 7,
        "created_at": iso(FIXED_NOW - timedelta(days=3)),
        "post_stream": {"posts": list(posts)},
    }


def make_detail_post(
    post_number: int,
    username: str,
    cooked: str,
    *,
    accepted_answer: bool = False,
) -> dict[str, Any]:
    return {
        "id": 1000 + post_number,
        "username": username,
        "created_at": iso(FIXED_NOW - timedelta(days=3) + timedelta(hours=post_number)),
        "cooked": cooked,
        "post_number": post_number,
        "accepted_answer": accepted_answer,
    }


# ══════════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture(autouse=True)
def clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
async def mock_client():
    """
    Factory for an AsyncClient backed by httpx.MockTransport.

    Routes map a URL path (e.g. "/search.json") to a JSON-able body, an
    (status, body) tuple, or an exception instance to raise. Every request
    is recorded on `client.requests`.
    """

    clients: list[httpx.AsyncClient] = []

    def factory(routes: dict[str, Any]) -> httpx.AsyncClient:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            route = routes.get(request.url.path)
            if route is None:
                return httpx.Response(404, json={"errors": ["not found"]})
            if isinstance(route, Exception):
                raise route
            if isinstance(route, tuple):
                status, body = route
            else:
                status, body = 200, route
            if isinstance(body, (bytes, str)):
                return httpx.Response(status, content=body)
            return httpx.Response(status, content=json.dumps(body).encode())

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url=FORUM
        )
        client.requests = requests
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
