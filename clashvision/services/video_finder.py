"""
Deck video finder.

Drives the full ranking flow for one deck:
1. Build search strategies for the deck
2. Run every search concurrently and wait for all of them
3. Merge results, keeping the first copy of each video id
4. Fetch transcripts for every candidate in rate-limited batches
5. Score, filter and rank the candidates

Upstream failures degrade to fewer candidates, never to an error.
"""

import asyncio
import logging
from datetime import UTC, datetime

import httpx

from clashvision.analysis.relevance import rank_videos
from clashvision.analysis.strategies import build_search_strategies
from clashvision.config import MAX_RANKED_VIDEOS, NO_MATCHING_VIDEOS_MESSAGE, settings
from clashvision.models.deck import Deck
from clashvision.models.video import SearchStrategy, VideoCandidate, VideoRankingResult
from clashvision.services.transcripts import TranscriptFetcher
from clashvision.services.youtube_search import YouTubeSearchClient

logger = logging.getLogger(__name__)


def merge_candidates(results: list[list[VideoCandidate]]) -> list[VideoCandidate]:
    """
    Merge per-strategy results into one list without duplicates.

    The first occurrence of a video id wins; order follows strategy
    order, then result order within a strategy.
    """
    merged: dict[str, VideoCandidate] = {}
    for videos in results:
        for video in videos:
            merged.setdefault(video.id, video)
    return list(merged.values())


class VideoFinder:
    """Finds and ranks YouTube videos that discuss a given deck."""

    def __init__(
        self,
        search_client: YouTubeSearchClient,
        transcript_fetcher: TranscriptFetcher,
        result_limit: int = MAX_RANKED_VIDEOS,
    ) -> None:
        """
        Initialize the finder.

        Args:
            search_client: Runs individual search strategies
            transcript_fetcher: Fetches transcripts in batches
            result_limit: Max videos returned
        """
        self.search_client = search_client
        self.transcript_fetcher = transcript_fetcher
        self.result_limit = result_limit

    async def _run_searches(self, strategies: list[SearchStrategy]) -> list[list[VideoCandidate]]:
        results = await asyncio.gather(
            *(self.search_client.search(strategy) for strategy in strategies),
            return_exceptions=True,
        )

        settled: list[list[VideoCandidate]] = []
        for strategy, result in zip(strategies, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Search strategy %r crashed: %s", strategy.query_text, result)
                settled.append([])
            else:
                settled.append(result)
        return settled

    async def find_videos(self, deck: Deck, now: datetime | None = None) -> VideoRankingResult:
        """
        Find videos for a deck.

        Args:
            deck: Validated 8-card deck
            now: Reference time (defaults to the current UTC time)

        Returns:
            VideoRankingResult; when no video matches at least 3 cards the
            video list is empty and message explains why
        """
        now = now or datetime.now(UTC)

        strategies = build_search_strategies(deck, now)
        logger.info("Running %d search strategies for deck: %s", len(strategies), deck.card_names)

        results = await self._run_searches(strategies)
        candidates = merge_candidates(results)
        logger.info(
            "Merged %d results into %d unique candidates",
            sum(len(r) for r in results),
            len(candidates),
        )

        transcripts = await self.transcript_fetcher.fetch_many([video.id for video in candidates])

        ranked = rank_videos(deck, candidates, transcripts, now, limit=self.result_limit)

        result = VideoRankingResult(
            videos=ranked,
            strategies_run=len(strategies),
            candidates_found=len(candidates),
            transcripts_found=len(transcripts),
        )
        if not result.has_matches:
            result.message = NO_MATCHING_VIDEOS_MESSAGE
        return result


async def find_deck_videos(deck: Deck, now: datetime | None = None) -> VideoRankingResult:
    """
    Rank videos for a deck using a shared HTTP client for the request.

    Convenience entry point for API handlers.
    """
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        finder = VideoFinder(
            search_client=YouTubeSearchClient(client=client),
            transcript_fetcher=TranscriptFetcher(client=client),
        )
        return await finder.find_videos(deck, now)
