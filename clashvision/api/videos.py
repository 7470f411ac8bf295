"""
Video endpoints.

The deck endpoint runs the full ranking pipeline. The search and
transcript endpoints expose the individual upstream lookups.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from clashvision.api.decks import DeckRequest
from clashvision.config import MAX_SEARCH_RESULTS
from clashvision.models.deck import create_deck
from clashvision.models.video import ScoredVideo, VideoCandidate
from clashvision.services.transcripts import TranscriptFetcher
from clashvision.services.video_finder import find_deck_videos
from clashvision.services.youtube_search import YouTubeSearchClient

router = APIRouter(prefix="/videos", tags=["videos"])


class VideoResponse(BaseModel):
    """Response model for a single video."""

    id: str
    title: str
    description: str
    channel_title: str
    thumbnail_url: str
    published_at: datetime
    watch_url: str
    embed_url: str
    duration: str | None = Field(default=None, description="H:MM:SS or M:SS when known")

    @classmethod
    def from_candidate(cls, video: VideoCandidate) -> "VideoResponse":
        return cls(
            id=video.id,
            title=video.title,
            description=video.description,
            channel_title=video.channel_title,
            thumbnail_url=video.thumbnail_url,
            published_at=video.published_at,
            watch_url=video.watch_url,
            embed_url=video.embed_url,
            duration=video.duration_text,
        )


class ScoredVideoResponse(BaseModel):
    """A video with its match against the deck."""

    video: VideoResponse
    cards_matched: int
    score: float
    matched_card_names: list[str] = Field(default_factory=list)
    has_transcript: bool = False

    @classmethod
    def from_scored(cls, scored: ScoredVideo) -> "ScoredVideoResponse":
        return cls(
            video=VideoResponse.from_candidate(scored.video),
            cards_matched=scored.cards_matched,
            score=scored.score,
            matched_card_names=sorted(scored.matched_card_names),
            has_transcript=scored.has_transcript,
        )


class VideoRankingResponse(BaseModel):
    """Response model for deck video ranking."""

    videos: list[ScoredVideoResponse]
    count: int
    strategies_run: int = 0
    candidates_found: int = 0
    transcripts_found: int = 0
    message: str | None = Field(
        default=None,
        description="Set when no video matched enough of the deck",
    )


class VideoSearchResponse(BaseModel):
    """Response model for a raw search."""

    query: str
    videos: list[VideoResponse]
    count: int


class TranscriptResponse(BaseModel):
    """Response model for a single transcript."""

    video_id: str
    transcript: str | None = None


class TranscriptBatchResponse(BaseModel):
    """Response model for several transcripts."""

    transcripts: dict[str, str] = Field(default_factory=dict)
    requested: int
    found: int


@router.post("/deck", response_model=VideoRankingResponse)
async def find_videos_for_deck(request: DeckRequest) -> VideoRankingResponse:
    """
    Find videos that discuss the given deck.

    Returns up to 24 videos ordered by cards matched, then score.
    An empty list with a message means no video matched at least 3 cards.
    Returns 400 if the deck is not exactly 8 distinct cards.
    """
    deck = create_deck(request.to_cards())
    result = await find_deck_videos(deck)

    return VideoRankingResponse(
        videos=[ScoredVideoResponse.from_scored(s) for s in result.videos],
        count=len(result.videos),
        strategies_run=result.strategies_run,
        candidates_found=result.candidates_found,
        transcripts_found=result.transcripts_found,
        message=result.message,
    )


@router.get("/search", response_model=VideoSearchResponse)
async def search_videos(
    q: Annotated[str | None, Query()] = None,
    max_results: Annotated[int, Query(ge=1, le=MAX_SEARCH_RESULTS)] = 10,
) -> VideoSearchResponse:
    """
    Run a single YouTube search.

    Returns 400 if no query is given.
    """
    if not q:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'q' is required",
        )

    videos = await YouTubeSearchClient().search_query(q, max_results=max_results)

    return VideoSearchResponse(
        query=q,
        videos=[VideoResponse.from_candidate(v) for v in videos],
        count=len(videos),
    )


@router.get("/transcripts", response_model=TranscriptResponse | TranscriptBatchResponse)
async def get_transcripts(
    video_id: str | None = None,
    video_ids: str | None = None,
) -> TranscriptResponse | TranscriptBatchResponse:
    """
    Get transcripts for one video (video_id) or several (comma-separated video_ids).

    Returns 400 if neither parameter is given.
    """
    fetcher = TranscriptFetcher()

    if video_id:
        transcript = await fetcher.fetch(video_id)
        return TranscriptResponse(video_id=video_id, transcript=transcript)

    if video_ids:
        ids = [vid.strip() for vid in video_ids.split(",") if vid.strip()]
        transcripts = await fetcher.fetch_many(ids)
        return TranscriptBatchResponse(
            transcripts=transcripts,
            requested=len(ids),
            found=len(transcripts),
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="video_id or video_ids parameter required",
    )
