"""
YouTube Data API search client.

Runs one SearchStrategy against the YouTube search endpoint and turns
the response into VideoCandidate objects. Failures never propagate:
a failed search returns an empty list so that one bad strategy cannot
sink the others running alongside it.
"""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

import httpx

from clashvision.config import MAX_SEARCH_RESULTS, settings
from clashvision.models.video import ResultOrder, SearchStrategy, VideoCandidate

logger = logging.getLogger(__name__)

THUMBNAIL_PREFERENCE = ("high", "medium", "default")


def format_published_after(moment: datetime) -> str:
    """RFC 3339 timestamp in UTC as the search API expects."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_published_at(value: str) -> datetime:
    """Parse an API timestamp like 2024-05-01T12:00:00Z."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def build_search_params(strategy: SearchStrategy, api_key: str) -> dict[str, Any]:
    """
    Translate a strategy into search query parameters.

    A channel filter is expressed in the query text, since the API only
    filters by channel id.
    """
    query = strategy.query_text
    if strategy.channel_filter:
        query = f"{query} channel:{strategy.channel_filter}"

    params: dict[str, Any] = {
        "key": api_key,
        "q": query,
        "part": "snippet",
        "type": "video",
        "maxResults": min(strategy.max_results, MAX_SEARCH_RESULTS),
        "relevanceLanguage": "en",
        "safeSearch": "none",
        "order": strategy.result_order.value,
    }

    if strategy.published_after is not None:
        params["publishedAfter"] = format_published_after(strategy.published_after)

    return params


def _pick_thumbnail(thumbnails: dict[str, Any]) -> str:
    for size in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return str(url)
    return ""


def parse_search_response(data: dict[str, Any]) -> list[VideoCandidate]:
    """
    Convert a search response body into candidates.

    Items that are not videos (no videoId) are skipped.

    Raises:
        AttributeError, KeyError, TypeError, ValueError: If the payload is malformed
    """
    videos: list[VideoCandidate] = []

    for item in data["items"]:
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            continue

        snippet = item["snippet"]
        videos.append(
            VideoCandidate(
                id=video_id,
                title=snippet.get("title") or "",
                description=snippet.get("description") or "",
                channel_title=snippet.get("channelTitle") or "",
                thumbnail_url=_pick_thumbnail(snippet.get("thumbnails") or {}),
                published_at=parse_published_at(snippet["publishedAt"]),
            )
        )

    return videos


def parse_durations(data: dict[str, Any]) -> dict[str, str]:
    """Map video id to its ISO 8601 duration from a videos?part=contentDetails body."""
    durations: dict[str, str] = {}
    for item in data.get("items") or []:
        duration = (item.get("contentDetails") or {}).get("duration")
        if item.get("id") and duration:
            durations[item["id"]] = duration
    return durations


class YouTubeSearchClient:
    """
    Client for the YouTube search endpoint.

    Pass a shared httpx.AsyncClient to reuse connections across the
    concurrent searches of one ranking request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the search client.

        Args:
            api_key: YouTube Data API key. Defaults to settings.youtube_api_key.
            base_url: API base URL. Defaults to settings.youtube_api_base.
            timeout: Per-request timeout in seconds.
            client: Optional shared HTTP client.
        """
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.base_url = base_url or settings.youtube_api_base
        self.timeout = timeout or settings.request_timeout
        self._client = client

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/{path}"
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params)

    async def fetch_durations(self, video_ids: list[str]) -> dict[str, str]:
        """
        Look up ISO 8601 durations for up to 50 videos in one request.

        Returns an empty mapping on any failure; durations are cosmetic.
        """
        if not video_ids:
            return {}

        params = {
            "key": self.api_key,
            "id": ",".join(video_ids[:MAX_SEARCH_RESULTS]),
            "part": "contentDetails",
        }
        try:
            response = await self._get("videos", params)
            response.raise_for_status()
            return parse_durations(response.json())
        except httpx.HTTPError as e:
            logger.warning("YouTube video details failed: %s", e)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed YouTube video details response: %s", e)
        return {}

    async def search(self, strategy: SearchStrategy) -> list[VideoCandidate]:
        """
        Run one search strategy and attach video durations.

        Returns:
            Candidates in API order; empty on any transport, status or
            payload error of the search itself
        """
        params = build_search_params(strategy, self.api_key)

        try:
            response = await self._get("search", params)
            response.raise_for_status()
            videos = parse_search_response(response.json())
        except httpx.HTTPError as e:
            logger.warning("YouTube search failed for %r: %s", params["q"], e)
            return []
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed YouTube search response for %r: %s", params["q"], e)
            return []

        durations = await self.fetch_durations([video.id for video in videos])
        videos = [replace(video, duration=durations.get(video.id)) for video in videos]

        logger.debug("YouTube search %r returned %d videos", params["q"], len(videos))
        return videos

    async def search_query(
        self,
        query: str,
        max_results: int = 10,
        order: ResultOrder = ResultOrder.RELEVANCE,
    ) -> list[VideoCandidate]:
        """Run a single free-text search."""
        return await self.search(
            SearchStrategy(query_text=query, result_order=order, max_results=max_results)
        )
