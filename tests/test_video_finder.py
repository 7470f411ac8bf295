"""Tests for the deck video ranking flow."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clashvision.config import NO_MATCHING_VIDEOS_MESSAGE, TRUSTED_CHANNELS
from clashvision.models.deck import Deck
from clashvision.models.video import SearchStrategy, VideoCandidate
from clashvision.services.video_finder import VideoFinder, find_deck_videos, merge_candidates

MATCHING_TITLE = "Clash Royale Hog Rider Musketeer Cannon Fireball"


def _finder(search_results, transcripts: dict[str, str] | None = None, **kwargs) -> VideoFinder:
    search_client = MagicMock()
    search_client.search = AsyncMock(side_effect=search_results)
    transcript_fetcher = MagicMock()
    transcript_fetcher.fetch_many = AsyncMock(return_value=transcripts or {})
    return VideoFinder(search_client, transcript_fetcher, **kwargs)


class TestMergeCandidates:
    def test_first_occurrence_wins(self, make_video) -> None:
        first = make_video("dup", title="first copy")
        second = make_video("dup", title="second copy")
        other = make_video("other")

        merged = merge_candidates([[first], [other, second]])

        assert [v.id for v in merged] == ["dup", "other"]
        assert merged[0].title == "first copy"

    def test_empty(self) -> None:
        assert merge_candidates([[], []]) == []


class TestVideoFinder:
    async def test_find_videos(self, hog_deck: Deck, now: datetime, make_video) -> None:
        """Duplicates across strategies collapse to one ranked video."""
        shared = make_video("shared", title=MATCHING_TITLE)
        weak = make_video("weak", title="Clash Royale Hog Rider")

        def search(strategy: SearchStrategy) -> list[VideoCandidate]:
            return [shared, weak]

        finder = _finder(search)

        result = await finder.find_videos(hog_deck, now)

        assert [s.video.id for s in result.videos] == ["shared"]
        assert result.strategies_run == len(TRUSTED_CHANNELS) + 6
        assert result.candidates_found == 2
        assert result.message is None
        assert finder.search_client.search.await_count == result.strategies_run

    async def test_crashed_search_is_ignored(
        self, hog_deck: Deck, now: datetime, make_video
    ) -> None:
        """One failing strategy does not sink the others."""
        calls = {"count": 0}

        def search(strategy: SearchStrategy) -> list[VideoCandidate]:
            calls["count"] += 1
            if calls["count"] == 1:
                raise RuntimeError("search backend exploded")
            return [make_video("v1", title=MATCHING_TITLE)]

        result = await _finder(search).find_videos(hog_deck, now)

        assert [s.video.id for s in result.videos] == ["v1"]

    async def test_transcripts_feed_scoring(
        self, hog_deck: Deck, now: datetime, make_video
    ) -> None:
        video = make_video("v1", title="Clash Royale ladder push")
        transcripts = {"v1": "hog rider musketeer cannon fireball the log"}

        def search(strategy: SearchStrategy) -> list[VideoCandidate]:
            return [video]

        finder = _finder(search, transcripts)
        result = await finder.find_videos(hog_deck, now)

        assert result.transcripts_found == 1
        assert result.videos[0].has_transcript
        assert result.videos[0].cards_matched == 5
        finder.transcript_fetcher.fetch_many.assert_awaited_once_with(["v1"])

    async def test_transcripts_reach_deck_query_results(
        self, hog_deck: Deck, now: datetime, make_video
    ) -> None:
        """A full-deck result behind 100 creator results still gets its transcript."""
        full_deck_video = make_video("deckvid", title="Clash Royale ladder push")

        def search(strategy: SearchStrategy) -> list[VideoCandidate]:
            if strategy.channel_filter:
                return [
                    make_video(f"{strategy.channel_filter}-{i}", title="Clash Royale ladder push")
                    for i in range(10)
                ]
            if strategy.query_text.endswith(" deck"):
                return [full_deck_video]
            return []

        def fetch_many(video_ids: list[str]) -> dict[str, str]:
            if "deckvid" not in video_ids:
                return {}
            return {"deckvid": "hog rider musketeer ice spirit skeletons cannon "
                    "fireball the log electro spirit"}

        finder = _finder(search)
        finder.transcript_fetcher.fetch_many = AsyncMock(side_effect=fetch_many)

        result = await finder.find_videos(hog_deck, now)

        assert result.candidates_found == 10 * len(TRUSTED_CHANNELS) + 1
        assert [s.video.id for s in result.videos] == ["deckvid"]
        assert result.videos[0].cards_matched == 8
        requested = finder.transcript_fetcher.fetch_many.await_args.args[0]
        assert len(requested) == result.candidates_found

    async def test_no_matches_sets_message(self, hog_deck: Deck, now: datetime) -> None:
        result = await _finder(lambda strategy: []).find_videos(hog_deck, now)

        assert result.videos == []
        assert not result.has_matches
        assert result.message == NO_MATCHING_VIDEOS_MESSAGE

    async def test_result_limit(self, hog_deck: Deck, now: datetime, make_video) -> None:
        videos = [make_video(f"v{i}", title=MATCHING_TITLE) for i in range(40)]

        result = await _finder(lambda strategy: videos).find_videos(hog_deck, now)

        assert len(result.videos) == 24
        assert result.candidates_found == 40


class TestFindDeckVideos:
    @pytest.mark.parametrize("evolution", [False, True])
    async def test_wires_shared_client(
        self, hog_deck: Deck, evolution_deck: Deck, now: datetime, evolution: bool
    ) -> None:
        deck = evolution_deck if evolution else hog_deck

        with (
            patch(
                "clashvision.services.video_finder.YouTubeSearchClient.search",
                new=AsyncMock(return_value=[]),
            ),
            patch(
                "clashvision.services.video_finder.TranscriptFetcher.fetch_many",
                new=AsyncMock(return_value={}),
            ),
        ):
            result = await find_deck_videos(deck, now)

        assert result.videos == []
        assert result.strategies_run == len(TRUSTED_CHANNELS) + (7 if evolution else 6)
