"""Tests for core/aggregator.py."""

import asyncio
import logging
from datetime import timedelta

import httpx
import pytest

from api import discourse, docs, github
from core.aggregator import aggregate_sources, enhance_query
from core.errors import ForumPayloadError, ForumTransportError
from core.metrics import get_api_metrics
from models.config import ForumSettings
from models.forum import ForumSearchResponse
from models.search import ResultSource

from conftest import FORUM, make_post, make_search_payload, make_topic

SETTINGS = ForumSettings(forum_base_url=FORUM)


class TestEnhanceQuery:
    def test_with_version(self):
        assert enhance_query("routing", "v13") == "routing v13"

    def test_without_version(self):
        assert enhance_query("routing", None) == "routing"


class TestAggregateSources:
    """Test suite for aggregate_sources."""

    async def test_all_branches_succeed(self, mock_client, now):
        topics = [
            make_topic(i, f"Routing topic {i}", views=10 * i, now=now) for i in range(1, 6)
        ]
        client = mock_client(
            {"/search.json": make_search_payload(topics, [make_post(1)])}
        )

        result = await aggregate_sources(
            "routing", "v13", settings=SETTINGS, client=client, now=now
        )

        assert len(result.forum) == 3
        assert len(result.docs) == 1
        assert len(result.github) == 2
        assert result.total == 6
        assert result.docs[0].url == "https://docs.umbraco.com/v13/search?q=routing"
        assert client.requests[0].url.params["q"] == "routing v13"

    async def test_forum_transport_error_leaves_other_slots(
        self, mock_client, now, caplog
    ):
        client = mock_client({"/search.json": (503, {"errors": ["down"]})})

        with caplog.at_level(logging.WARNING, logger="core.aggregator"):
            result = await aggregate_sources(
                "routing", settings=SETTINGS, client=client, now=now
            )

        assert result.forum == []
        assert result.docs
        assert result.github
        assert "Forum branch failed" in caplog.text
        assert get_api_metrics("aggregate:forum").failed_calls == 1

    async def test_forum_timeout_leaves_other_slots(self, mock_client, now):
        client = mock_client({"/search.json": httpx.ReadTimeout("slow")})

        result = await aggregate_sources("routing", settings=SETTINGS, client=client, now=now)

        assert result.forum == []
        assert len(result.docs) == 1
        assert len(result.github) == 2

    async def test_forum_malformed_payload(self, mock_client, now):
        client = mock_client({"/search.json": b"<html>not json</html>"})

        result = await aggregate_sources("routing", settings=SETTINGS, client=client, now=now)

        assert result.forum == []
        assert result.total == 3

    async def test_every_branch_failing_still_returns(self, monkeypatch, now):
        async def boom(*args, **kwargs):
            raise ForumTransportError("unreachable")

        async def bad(*args, **kwargs):
            raise ForumPayloadError("bad")

        monkeypatch.setattr(discourse, "search", boom)
        monkeypatch.setattr(docs, "search", bad)
        monkeypatch.setattr(github, "search", bad)

        result = await aggregate_sources("routing", settings=SETTINGS, now=now)

        assert result.total == 0
        assert [source for source, _ in result.slots()] == [
            ResultSource.FORUM,
            ResultSource.DOCS,
            ResultSource.GITHUB,
        ]

    async def test_branch_cancellation_empties_only_that_slot(self, monkeypatch, now):
        async def cancelled(*args, **kwargs):
            raise asyncio.CancelledError()

        monkeypatch.setattr(github, "search", cancelled)

        async def no_forum(*args, **kwargs):
            return ForumSearchResponse()

        monkeypatch.setattr(discourse, "search", no_forum)

        result = await aggregate_sources("routing", settings=SETTINGS, now=now)

        assert result.github == []
        assert len(result.docs) == 1

    async def test_slot_order_independent_of_completion(self, monkeypatch, mock_client, now):
        real_docs = docs.search

        async def slow_docs(*args, **kwargs):
            await asyncio.sleep(0.05)
            return await real_docs(*args, **kwargs)

        monkeypatch.setattr(docs, "search", slow_docs)
        client = mock_client({"/search.json": make_search_payload([make_topic(now=now)])})

        result = await aggregate_sources("routing", settings=SETTINGS, client=client, now=now)

        as_dict = result.to_dict()
        assert list(as_dict) == ["forum", "docs", "github"]
        assert as_dict["docs"][0]["source"] == "Docs"
        assert as_dict["forum"][0]["source"] == "Forum"

    async def test_caller_cancellation_propagates(self, monkeypatch, now):
        started = asyncio.Event()

        async def hang(*args, **kwargs):
            started.set()
            await asyncio.sleep(3600)

        monkeypatch.setattr(discourse, "search", hang)

        task = asyncio.create_task(aggregate_sources("routing", settings=SETTINGS, now=now))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    async def test_forum_ranked_by_version_hint(self, mock_client, now):
        topics = [
            make_topic(1, "Routing question", age=timedelta(days=40), now=now),
            make_topic(2, "Routing question in v13", age=timedelta(days=40), now=now),
        ]
        client = mock_client({"/search.json": make_search_payload(topics)})

        result = await aggregate_sources(
            "routing", "v13", settings=SETTINGS, client=client, now=now
        )

        assert result.forum[0].title == "Routing question in v13"
        assert result.forum[0].relevance_score > result.forum[1].relevance_score
