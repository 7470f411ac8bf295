"""
Video-to-deck relevance scoring.

Scores each candidate video against a deck by looking for the deck's
card names in three independent text sources: title, description and
transcript. Videos that do not mention the game, or that mention fewer
than 3 of the 8 cards, are dropped.

Ranking order:
1. cards_matched (descending) - coverage is the authoritative signal
2. score (descending) - breaks ties among equally covering videos
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from clashvision.config import (
    GAME_NAME_TERMS,
    MAX_RANKED_VIDEOS,
    MIN_CARDS_MATCHED,
    TRUSTED_CHANNELS,
)
from clashvision.models.card import Card
from clashvision.models.deck import Deck
from clashvision.models.video import ScoredVideo, VideoCandidate

logger = logging.getLogger(__name__)

EVOLUTION_TITLE_PATTERN = re.compile(r"\bevo")

# Words shorter than this are ignored when matching multi-word names word by word
MIN_MATCH_WORD_LENGTH = 3


@dataclass(frozen=True)
class ScoringWeights:
    """
    Point values for the composite relevance score.

    These are empirically chosen; only their relative order matters.
    The base table grows exponentially with the number of cards matched.
    """

    base_by_cards_matched: Mapping[int, float] = field(
        default_factory=lambda: {8: 1000, 7: 500, 6: 250, 5: 100, 4: 50, 3: 25}
    )
    title_match: float = 20
    transcript_match: float = 30
    trusted_channel: float = 50
    evolution_title: float = 15

    # (max age, bonus) checked in order, first hit wins
    recent_bonuses: tuple[tuple[timedelta, float], ...] = (
        (timedelta(days=91), 20),
        (timedelta(days=182), 10),
        (timedelta(days=365), 5),
    )
    # (min age, penalty) checked in order, first hit wins
    stale_penalties: tuple[tuple[timedelta, float], ...] = (
        (timedelta(days=1095), -10),
        (timedelta(days=730), -5),
    )

    # Bonus for the current year, last year and the year before in the title
    year_bonuses: tuple[float, ...] = (10, 5, 2)

    title_keyword_bonuses: Mapping[str, float] = field(
        default_factory=lambda: {
            "guide": 10,
            "deck": 5,
            "best": 5,
            "meta": 5,
            "strategy": 5,
        }
    )


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class CardMatch:
    """Where a single deck card was found."""

    card: Card
    in_title: bool
    in_description: bool
    in_transcript: bool

    @property
    def matched(self) -> bool:
        return self.in_title or self.in_description or self.in_transcript


def mentions_game(*texts: str) -> bool:
    """True if any text mentions the game by name or abbreviation."""
    return any(term in text.lower() for text in texts for term in GAME_NAME_TERMS)


def card_in_text(card_name: str, text: str) -> bool:
    """
    Case-insensitive check for a card name inside a text.

    The evolution marker is ignored. A multi-word name also counts as
    found when every word longer than 2 characters appears somewhere in
    the text, since titles and transcripts often drop connecting words.
    """
    if not text:
        return False

    text_lower = text.lower()
    bare = card_name.lower().removesuffix(" (evolution)")

    if bare in text_lower:
        return True

    words = bare.split()
    if len(words) < 2:
        return False

    significant = [w for w in words if len(w) >= MIN_MATCH_WORD_LENGTH]
    return bool(significant) and all(w in text_lower for w in significant)


def match_cards(deck: Deck, video: VideoCandidate, transcript: str = "") -> list[CardMatch]:
    """Check every deck card against title, description and transcript."""
    return [
        CardMatch(
            card=card,
            in_title=card_in_text(card.name, video.title),
            in_description=card_in_text(card.name, video.description),
            in_transcript=card_in_text(card.name, transcript),
        )
        for card in deck
    ]


def _recency_adjustment(age: timedelta, weights: ScoringWeights) -> float:
    for max_age, bonus in weights.recent_bonuses:
        if age < max_age:
            return bonus
    for min_age, penalty in weights.stale_penalties:
        if age > min_age:
            return penalty
    return 0


def _title_bonuses(title: str, now: datetime, weights: ScoringWeights) -> float:
    title_lower = title.lower()
    bonus = 0.0

    for offset, year_bonus in enumerate(weights.year_bonuses):
        if str(now.year - offset) in title_lower:
            bonus += year_bonus

    for keyword, keyword_bonus in weights.title_keyword_bonuses.items():
        if keyword in title_lower:
            bonus += keyword_bonus

    return bonus


def _is_trusted_channel(channel_title: str, trusted_channels: Sequence[str]) -> bool:
    channel = channel_title.strip().lower()
    return any(channel == trusted.lower() for trusted in trusted_channels)


def score_video(
    deck: Deck,
    video: VideoCandidate,
    transcript: str,
    now: datetime,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    trusted_channels: Sequence[str] = TRUSTED_CHANNELS,
) -> ScoredVideo | None:
    """
    Score one candidate against a deck.

    Args:
        deck: Validated 8-card deck
        video: Candidate to score
        transcript: Transcript text ("" when unavailable)
        now: Reference time for recency adjustments
        weights: Point values
        trusted_channels: Creators that earn the channel bonus

    Returns:
        ScoredVideo, or None if the video does not mention the game or
        matches fewer than 3 cards
    """
    if not mentions_game(video.title, video.description, transcript):
        return None

    matches = match_cards(deck, video, transcript)
    matched = [m for m in matches if m.matched]
    cards_matched = len(matched)

    if cards_matched < MIN_CARDS_MATCHED:
        return None

    score = weights.base_by_cards_matched.get(cards_matched, 0)
    score += weights.title_match * sum(1 for m in matched if m.in_title)
    score += weights.transcript_match * sum(1 for m in matched if m.in_transcript)

    if _is_trusted_channel(video.channel_title, trusted_channels):
        score += weights.trusted_channel

    if deck.has_evolution and EVOLUTION_TITLE_PATTERN.search(video.title.lower()):
        score += weights.evolution_title

    score += _recency_adjustment(now - video.published_at, weights)
    score += _title_bonuses(video.title, now, weights)

    return ScoredVideo(
        video=video,
        cards_matched=cards_matched,
        score=score,
        matched_card_names=frozenset(m.card.name for m in matched),
        has_transcript=bool(transcript),
    )


def rank_videos(
    deck: Deck,
    videos: Sequence[VideoCandidate],
    transcripts: Mapping[str, str],
    now: datetime,
    limit: int = MAX_RANKED_VIDEOS,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredVideo]:
    """
    Score, filter, sort and truncate candidate videos.

    Args:
        deck: Validated 8-card deck
        videos: Deduplicated candidates
        transcripts: video id -> transcript text (missing ids have none)
        now: Reference time for recency adjustments
        limit: Maximum number of videos returned
        weights: Point values

    Returns:
        ScoredVideo list sorted by (cards_matched, score) descending;
        empty when nothing clears the minimum match
    """
    scored: list[ScoredVideo] = []

    for video in videos:
        result = score_video(deck, video, transcripts.get(video.id, ""), now, weights)
        if result is not None:
            scored.append(result)

    scored.sort(key=lambda s: (s.cards_matched, s.score), reverse=True)

    logger.info(
        "Scored %d candidates: %d matched at least %d cards",
        len(videos),
        len(scored),
        MIN_CARDS_MATCHED,
    )
    return scored[:limit]
