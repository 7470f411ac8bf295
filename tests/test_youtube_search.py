"""Tests for the YouTube search client."""

from datetime import UTC, datetime

import httpx
import pytest
import respx

from clashvision.analysis.relevance import rank_videos
from clashvision.models.deck import Deck
from clashvision.models.video import PriorityTier, ResultOrder, SearchStrategy
from clashvision.services.youtube_search import (
    YouTubeSearchClient,
    build_search_params,
    format_published_after,
    parse_durations,
    parse_published_at,
    parse_search_response,
)

SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"


@pytest.fixture
def search_payload() -> dict:
    return {
        "items": [
            {
                "id": {"kind": "youtube#video", "videoId": "abc123"},
                "snippet": {
                    "title": "Hog Rider 2.6 Cycle Guide",
                    "description": "Clash Royale deck guide",
                    "channelTitle": "Clash with Ash",
                    "publishedAt": "2025-04-20T15:30:00Z",
                    "thumbnails": {
                        "default": {"url": "https://i.ytimg.com/vi/abc123/default.jpg"},
                        "high": {"url": "https://i.ytimg.com/vi/abc123/hqdefault.jpg"},
                    },
                },
            },
            {
                "id": {"kind": "youtube#channel", "channelId": "UC123"},
                "snippet": {"title": "A channel", "publishedAt": "2020-01-01T00:00:00Z"},
            },
            {
                "id": {"kind": "youtube#video", "videoId": "def456"},
                "snippet": {
                    "title": "Top ladder decks",
                    "publishedAt": "2025-05-01T00:00:00Z",
                    "thumbnails": {"medium": {"url": "https://i.ytimg.com/vi/def456/mq.jpg"}},
                },
            },
        ]
    }


@pytest.fixture
def videos_payload() -> dict:
    return {
        "items": [
            {"id": "abc123", "contentDetails": {"duration": "PT12M5S"}},
            {"id": "def456", "contentDetails": {"duration": "PT1H2M3S"}},
        ]
    }


@pytest.fixture
def strategy() -> SearchStrategy:
    return SearchStrategy(
        query_text="clash royale Hog Rider Musketeer",
        channel_filter="OJ",
        published_after=datetime(2024, 12, 1, 8, 0, tzinfo=UTC),
        result_order=ResultOrder.VIEW_COUNT,
        max_results=10,
        priority_tier=PriorityTier.HIGH,
    )


class TestSearchParams:
    def test_build_params(self, strategy: SearchStrategy) -> None:
        params = build_search_params(strategy, "test-key")

        assert params["key"] == "test-key"
        assert params["q"] == "clash royale Hog Rider Musketeer channel:OJ"
        assert params["type"] == "video"
        assert params["order"] == "viewCount"
        assert params["maxResults"] == 10
        assert params["publishedAfter"] == "2024-12-01T08:00:00Z"

    def test_max_results_capped(self) -> None:
        params = build_search_params(SearchStrategy(query_text="x", max_results=200), "k")

        assert params["maxResults"] == 50
        assert "publishedAfter" not in params

    def test_format_naive_datetime_as_utc(self) -> None:
        assert format_published_after(datetime(2025, 1, 2, 3, 4, 5)) == "2025-01-02T03:04:05Z"

    def test_parse_published_at(self) -> None:
        parsed = parse_published_at("2025-04-20T15:30:00Z")

        assert parsed == datetime(2025, 4, 20, 15, 30, tzinfo=UTC)


class TestParseSearchResponse:
    def test_parse_videos(self, search_payload: dict) -> None:
        """Non-video items are skipped."""
        videos = parse_search_response(search_payload)

        assert [v.id for v in videos] == ["abc123", "def456"]
        assert videos[0].channel_title == "Clash with Ash"
        assert videos[0].thumbnail_url.endswith("hqdefault.jpg")

    def test_thumbnail_fallback_and_missing_fields(self, search_payload: dict) -> None:
        videos = parse_search_response(search_payload)

        assert videos[1].thumbnail_url.endswith("mq.jpg")
        assert videos[1].description == ""
        assert videos[1].channel_title == ""

    def test_missing_items_raises(self) -> None:
        with pytest.raises(KeyError):
            parse_search_response({})


class TestParseDurations:
    def test_parse_durations(self) -> None:
        data = {
            "items": [
                {"id": "abc123", "contentDetails": {"duration": "PT12M5S"}},
                {"id": "def456", "contentDetails": {}},
                {"id": "ghi789"},
            ]
        }

        assert parse_durations(data) == {"abc123": "PT12M5S"}

    def test_empty_body(self) -> None:
        assert parse_durations({}) == {}


class TestYouTubeSearchClient:
    @respx.mock
    async def test_search(
        self, strategy: SearchStrategy, search_payload: dict, videos_payload: dict
    ) -> None:
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=search_payload)
        )
        respx.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json=videos_payload))
        client = YouTubeSearchClient(api_key="test-key")

        videos = await client.search(strategy)

        assert route.called
        request = route.calls.last.request
        assert request.url.params["q"] == "clash royale Hog Rider Musketeer channel:OJ"
        assert request.url.params["key"] == "test-key"
        assert [v.id for v in videos] == ["abc123", "def456"]

    @respx.mock
    async def test_durations_attached(
        self, strategy: SearchStrategy, search_payload: dict, videos_payload: dict
    ) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json=search_payload))
        details = respx.get(VIDEOS_URL).mock(
            return_value=httpx.Response(200, json=videos_payload)
        )

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        params = details.calls.last.request.url.params
        assert params["id"] == "abc123,def456"
        assert params["part"] == "contentDetails"
        assert videos[0].duration == "PT12M5S"
        assert videos[0].duration_text == "12:05"
        assert videos[1].duration_text == "1:02:03"

    @respx.mock
    async def test_details_failure_keeps_videos(
        self, strategy: SearchStrategy, search_payload: dict
    ) -> None:
        """Missing durations never drop search results."""
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json=search_payload))
        respx.get(VIDEOS_URL).mock(return_value=httpx.Response(500))

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        assert [v.id for v in videos] == ["abc123", "def456"]
        assert all(v.duration is None for v in videos)

    @respx.mock
    async def test_null_snippet_fields(self, hog_deck: Deck, now: datetime) -> None:
        """Null title, description or channel come back as empty strings and still rank."""
        payload = {
            "items": [
                {
                    "id": {"videoId": "nulls"},
                    "snippet": {
                        "title": None,
                        "description": None,
                        "channelTitle": None,
                        "thumbnails": None,
                        "publishedAt": "2025-04-20T15:30:00Z",
                    },
                },
                {
                    "id": {"videoId": "good"},
                    "snippet": {
                        "title": "Clash Royale Hog Rider Musketeer Cannon Fireball",
                        "description": None,
                        "channelTitle": "OJ",
                        "publishedAt": "2025-04-20T15:30:00Z",
                    },
                },
            ]
        }
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json=payload))
        respx.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json={"items": []}))

        videos = await YouTubeSearchClient(api_key="k").search_query("hog cycle")
        ranked = rank_videos(hog_deck, videos, {}, now)

        assert videos[0].title == ""
        assert videos[0].description == ""
        assert videos[0].channel_title == ""
        assert [s.video.id for s in ranked] == ["good"]

    @respx.mock
    async def test_non_dict_snippet_returns_empty(self, strategy: SearchStrategy) -> None:
        payload = {"items": [{"id": {"videoId": "x"}, "snippet": "oops"}]}
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json=payload))

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        assert videos == []

    @respx.mock
    async def test_http_error_returns_empty(self, strategy: SearchStrategy) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(403, json={"error": "quota"}))

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        assert videos == []

    @respx.mock
    async def test_network_error_returns_empty(self, strategy: SearchStrategy) -> None:
        respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectError("unreachable"))

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        assert videos == []

    @respx.mock
    async def test_malformed_payload_returns_empty(self, strategy: SearchStrategy) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"kind": "x"}))

        videos = await YouTubeSearchClient(api_key="k").search(strategy)

        assert videos == []

    @respx.mock
    async def test_shared_client(
        self, strategy: SearchStrategy, search_payload: dict, videos_payload: dict
    ) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json=search_payload))
        respx.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json=videos_payload))

        async with httpx.AsyncClient() as http:
            videos = await YouTubeSearchClient(api_key="k", client=http).search(strategy)

        assert len(videos) == 2

    @respx.mock
    async def test_search_query(self, search_payload: dict, videos_payload: dict) -> None:
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=search_payload)
        )
        respx.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json=videos_payload))

        videos = await YouTubeSearchClient(api_key="k").search_query("log bait", max_results=5)

        assert len(videos) == 2
        params = route.calls.last.request.url.params
        assert params["q"] == "log bait"
        assert params["maxResults"] == "5"
        assert "publishedAfter" not in params
