"""
Search strategy construction.

A single broad query under-retrieves: creators phrase deck videos in
many ways. The builder fans a deck out into several independent
searches (trusted creators, full deck, partial decks) and the ranking
pipeline merges and filters the results.
"""

from datetime import datetime, timedelta

from clashvision.config import MAX_SEARCH_RESULTS, TRUSTED_CHANNELS
from clashvision.models.deck import Deck
from clashvision.models.video import PriorityTier, ResultOrder, SearchStrategy

SIX_MONTHS = timedelta(days=182)
ONE_YEAR = timedelta(days=365)
TWO_YEARS = timedelta(days=730)

GAME_NAME = "clash royale"

CHANNEL_QUERY_CARDS = 4
CHANNEL_MAX_RESULTS = 10


def _names(deck: Deck, count: int) -> str:
    return " ".join(deck.base_names[:count])


def _cap(max_results: int) -> int:
    return min(max_results, MAX_SEARCH_RESULTS)


def build_search_strategies(
    deck: Deck,
    now: datetime,
    trusted_channels: tuple[str, ...] = TRUSTED_CHANNELS,
) -> list[SearchStrategy]:
    """
    Build the ordered list of searches for a deck.

    Trusted creators come first and are limited to the last 6 months.
    Deck-wide variants follow with 1-year or 2-year cutoffs. Decks with
    an evolution card get one extra evolution-specific search.

    Args:
        deck: Validated 8-card deck
        now: Reference time for recency cutoffs
        trusted_channels: Creators that get a dedicated search

    Returns:
        Non-empty list of SearchStrategy, every max_results <= 50
    """
    six_months_ago = now - SIX_MONTHS
    one_year_ago = now - ONE_YEAR
    two_years_ago = now - TWO_YEARS

    strategies: list[SearchStrategy] = [
        SearchStrategy(
            query_text=f"{GAME_NAME} {_names(deck, CHANNEL_QUERY_CARDS)}",
            channel_filter=channel,
            published_after=six_months_ago,
            result_order=ResultOrder.RELEVANCE,
            max_results=_cap(CHANNEL_MAX_RESULTS),
            priority_tier=PriorityTier.HIGH,
        )
        for channel in trusted_channels
    ]

    strategies.extend(
        [
            SearchStrategy(
                query_text=f"{GAME_NAME} {_names(deck, 8)} deck",
                published_after=one_year_ago,
                result_order=ResultOrder.RELEVANCE,
                max_results=_cap(50),
                priority_tier=PriorityTier.HIGH,
            ),
            SearchStrategy(
                query_text=f"{GAME_NAME} {_names(deck, 7)} deck guide",
                published_after=one_year_ago,
                result_order=ResultOrder.RELEVANCE,
                max_results=_cap(25),
                priority_tier=PriorityTier.HIGH,
            ),
            SearchStrategy(
                query_text=f"best {_names(deck, 6)} deck {GAME_NAME}",
                published_after=one_year_ago,
                result_order=ResultOrder.VIEW_COUNT,
                max_results=_cap(25),
                priority_tier=PriorityTier.MEDIUM,
            ),
            SearchStrategy(
                query_text=f"{_names(deck, 6)} meta deck {GAME_NAME}",
                published_after=one_year_ago,
                result_order=ResultOrder.DATE,
                max_results=_cap(25),
                priority_tier=PriorityTier.MEDIUM,
            ),
            SearchStrategy(
                query_text=f"{_names(deck, 5)} {GAME_NAME} strategy",
                published_after=two_years_ago,
                result_order=ResultOrder.RELEVANCE,
                max_results=_cap(20),
                priority_tier=PriorityTier.LOW,
            ),
            SearchStrategy(
                query_text=f"{_names(deck, 5)} gameplay {GAME_NAME}",
                published_after=two_years_ago,
                result_order=ResultOrder.VIEW_COUNT,
                max_results=_cap(20),
                priority_tier=PriorityTier.LOW,
            ),
        ]
    )

    if deck.has_evolution:
        strategies.append(
            SearchStrategy(
                query_text=f"{GAME_NAME} evolution {_names(deck, 7)}",
                published_after=one_year_ago,
                result_order=ResultOrder.RELEVANCE,
                max_results=_cap(25),
                priority_tier=PriorityTier.MEDIUM,
            )
        )

    return strategies
