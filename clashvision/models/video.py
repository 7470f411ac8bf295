import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

YOUTUBE_WATCH_BASE = "https://www.youtube.com/watch"
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed"

ISO_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


class ResultOrder(str, Enum):
    """Result ordering modes supported by the YouTube search API."""

    RELEVANCE = "relevance"
    DATE = "date"
    VIEW_COUNT = "viewCount"
    RATING = "rating"


class PriorityTier(str, Enum):
    """How much a search strategy is expected to contribute."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class SearchStrategy:
    """
    One search to run against the video search service.

    Attributes:
        query_text: Free-text query
        channel_filter: Restrict to a creator by channel name
        published_after: Only videos published after this moment
        result_order: Ordering requested from the search service
        max_results: Number of results requested (<= 50)
        priority_tier: Expected usefulness of the results
    """

    query_text: str
    channel_filter: str | None = None
    published_after: datetime | None = None
    result_order: ResultOrder = ResultOrder.RELEVANCE
    max_results: int = 25
    priority_tier: PriorityTier = PriorityTier.MEDIUM


@dataclass(frozen=True)
class VideoCandidate:
    """A video returned by a search, identified by its YouTube id."""

    id: str
    title: str
    description: str
    channel_title: str
    thumbnail_url: str
    published_at: datetime
    duration: str | None = None

    @property
    def duration_text(self) -> str | None:
        """Duration as H:MM:SS or M:SS, None when unknown."""
        return parse_duration(self.duration) if self.duration else None

    @property
    def watch_url(self) -> str:
        return build_watch_url(self.id)

    @property
    def embed_url(self) -> str:
        return build_embed_url(self.id)


@dataclass(frozen=True)
class ScoredVideo:
    """
    A candidate video scored against a deck.

    Attributes:
        video: The scored candidate
        cards_matched: Deck cards found in title, description or transcript
        score: Composite relevance score
        matched_card_names: Names of the matched deck cards
        has_transcript: Whether a transcript contributed to matching
    """

    video: VideoCandidate
    cards_matched: int
    score: float
    matched_card_names: frozenset[str] = field(default_factory=frozenset)
    has_transcript: bool = False


@dataclass
class VideoRankingResult:
    """Outcome of one ranking request."""

    videos: list[ScoredVideo]
    strategies_run: int = 0
    candidates_found: int = 0
    transcripts_found: int = 0
    message: str | None = None

    @property
    def has_matches(self) -> bool:
        """False when no video cleared the minimum card match."""
        return bool(self.videos)


def build_watch_url(video_id: str, start_seconds: int | None = None) -> str:
    """YouTube watch URL, optionally starting at a timestamp."""
    url = f"{YOUTUBE_WATCH_BASE}?v={video_id}"
    return f"{url}&t={start_seconds}s" if start_seconds else url


def build_embed_url(video_id: str, start_seconds: int | None = None) -> str:
    """YouTube embed URL, optionally starting at a timestamp."""
    url = f"{YOUTUBE_EMBED_BASE}/{video_id}"
    return f"{url}?start={start_seconds}" if start_seconds else url


def parse_duration(duration: str) -> str:
    """
    Format an ISO 8601 duration (PT1H2M3S) as H:MM:SS or M:SS.

    Unparseable values format as "0:00".
    """
    match = ISO_DURATION_PATTERN.search(duration)
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
