from clashvision.analysis.composition import (
    analyze_deck,
    analyze_deck_composition,
    detect_deck_archetype,
    get_deck_counters,
)
from clashvision.analysis.relevance import rank_videos, score_video
from clashvision.analysis.strategies import build_search_strategies

__all__ = [
    "analyze_deck",
    "analyze_deck_composition",
    "build_search_strategies",
    "detect_deck_archetype",
    "get_deck_counters",
    "rank_videos",
    "score_video",
]
