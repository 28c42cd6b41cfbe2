"""Unit tests for api/discourse.py."""

from datetime import timedelta

import httpx
import pytest

from api import discourse
from core.errors import (
    ForumError,
    ForumPayloadError,
    ForumTimeoutError,
    ForumTransportError,
)
from core.metrics import get_api_metrics
from models.forum import ForumSearchResponse

from conftest import (
    FORUM,
    make_detail_post,
    make_post,
    make_search_payload,
    make_topic,
    make_topic_detail,
)


class TestSearch:
    """Test suite for discourse.search."""

    async def test_parses_topics_and_posts(self, mock_client, now):
        payload = make_search_payload(
            [make_topic(7, "Block list in v14", now=now)], [make_post(7, "bob")]
        )
        client = mock_client({"/search.json": payload})

        response = await discourse.search("block list", base_url=FORUM, client=client)

        assert response.topics[0].id == 7
        assert response.author_of(7) == "bob"
        assert client.requests[0].url.params["q"] == "block list"
        assert get_api_metrics("forum").successful_calls == 1

    async def test_empty_result_is_not_an_error(self, mock_client):
        client = mock_client({"/search.json": {"grouped_search_result": {}}})

        response = await discourse.search("nothing", base_url=FORUM, client=client)

        assert response.topics == []
        assert response.posts == []

    async def test_http_status_maps_to_transport_error(self, mock_client):
        client = mock_client({"/search.json": (500, {"errors": ["boom"]})})

        with pytest.raises(ForumTransportError) as exc:
            await discourse.search("x", base_url=FORUM, client=client)

        assert exc.value.status_code == 500
        assert get_api_metrics("forum").error_types == {"http_500": 1}

    async def test_connect_error_maps_to_transport_error(self, mock_client):
        client = mock_client({"/search.json": httpx.ConnectError("dns")})

        with pytest.raises(ForumTransportError) as exc:
            await discourse.search("x", base_url=FORUM, client=client)

        assert exc.value.status_code is None

    async def test_timeout_maps_to_timeout_error(self, mock_client):
        client = mock_client({"/search.json": httpx.ConnectTimeout("slow")})

        with pytest.raises(ForumTimeoutError) as exc:
            await discourse.search("x", base_url=FORUM, client=client)

        assert exc.value.describe() == "Request timed out."

    async def test_invalid_json_maps_to_payload_error(self, mock_client):
        client = mock_client({"/search.json": b"{not json"})

        with pytest.raises(ForumPayloadError):
            await discourse.search("x", base_url=FORUM, client=client)

    async def test_wrong_shape_maps_to_payload_error(self, mock_client):
        client = mock_client({"/search.json": {"topics": "not-a-list"}})

        with pytest.raises(ForumPayloadError):
            await discourse.search("x", base_url=FORUM, client=client)

    async def test_non_object_maps_to_payload_error(self, mock_client):
        client = mock_client({"/search.json": [1, 2, 3]})

        with pytest.raises(ForumError):
            await discourse.search("x", base_url=FORUM, client=client)


class TestOtherEndpoints:
    async def test_get_topic(self, mock_client):
        detail = make_topic_detail(
            42, [make_detail_post(1, "alice", "<p>Hi</p>")]
        )
        client = mock_client({"/t/42.json": detail})

        topic = await discourse.get_topic(42, base_url=FORUM, client=client)

        assert topic.id == 42
        assert topic.posts[0].username == "alice"

    async def test_get_latest(self, mock_client, now):
        client = mock_client(
            {"/latest.json": {"topic_list": {"topics": [make_topic(3, now=now)]}}}
        )

        topics = await discourse.get_latest(base_url=FORUM, client=client)

        assert [t.id for t in topics] == [3]

    async def test_get_latest_missing_topic_list(self, mock_client):
        client = mock_client({"/latest.json": {"users": []}})

        with pytest.raises(ForumPayloadError):
            await discourse.get_latest(base_url=FORUM, client=client)

    async def test_get_categories(self, mock_client):
        payload = {
            "category_list": {
                "categories": [
                    {"id": 1, "name": "Extending", "slug": "extending", "position": 2}
                ]
            }
        }
        client = mock_client({"/categories.json": payload})

        categories = await discourse.get_categories(base_url=FORUM, client=client)

        assert categories[0].name == "Extending"

    async def test_get_categories_missing_list(self, mock_client):
        client = mock_client({"/categories.json": {}})

        with pytest.raises(ForumPayloadError):
            await discourse.get_categories(base_url=FORUM, client=client)


class TestToCandidates:
    """Test suite for discourse.to_candidates."""

    def test_maps_topic_fields(self, now):
        response = ForumSearchResponse.model_validate(
            make_search_payload(
                [
                    make_topic(
                        9,
                        "Caf&eacute; routing",
                        views=200,
                        like_count=4,
                        reply_count=2,
                        age=timedelta(days=3),
                        now=now,
                    )
                ],
                [make_post(9, "carol")],
            )
        )

        [candidate] = discourse.to_candidates(response, base_url=FORUM, now=now)

        assert candidate.title == "Café routing"
        assert candidate.url == f"{FORUM}/t/caf&eacute;-routing/9"
        assert candidate.engagement_score == 4 + 20 + 4
        assert candidate.timestamp == now - timedelta(days=3)
        assert "👤 Author: carol" in candidate.preview

    def test_missing_timestamp_uses_now(self, now):
        response = ForumSearchResponse.model_validate(
            make_search_payload([make_topic(1, "x", age=None, now=now)])
        )

        [candidate] = discourse.to_candidates(response, base_url=FORUM, now=now)

        assert candidate.timestamp == now
        assert "Author: Unknown" in candidate.preview

    def test_topic_url_strips_trailing_slash(self):
        topic = ForumSearchResponse.model_validate(
            make_search_payload([make_topic(5, "abc")])
        ).topics[0]
        assert discourse.topic_url(topic, FORUM + "/") == f"{FORUM}/t/abc/5"
