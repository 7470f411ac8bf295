"""
ClashVision services.

Clients for the card catalog, player profiles, meta-game statistics,
YouTube search and transcripts, plus the deck video finder that ties
them together.
"""

from clashvision.services.card_catalog import CardCatalog, build_catalog, get_card_catalog
from clashvision.services.meta import (
    fetch_card_stats,
    fetch_challenges,
    fetch_global_tournaments,
    fetch_meta_decks,
    fetch_top_decks,
    search_decks_by_cards,
)
from clashvision.services.player import PlayerProfile, fetch_player_profile
from clashvision.services.transcripts import TranscriptFetcher
from clashvision.services.video_finder import VideoFinder, find_deck_videos
from clashvision.services.youtube_search import YouTubeSearchClient

__all__ = [
    "CardCatalog",
    "PlayerProfile",
    "TranscriptFetcher",
    "VideoFinder",
    "YouTubeSearchClient",
    "build_catalog",
    "fetch_card_stats",
    "fetch_challenges",
    "fetch_global_tournaments",
    "fetch_meta_decks",
    "fetch_player_profile",
    "fetch_top_decks",
    "find_deck_videos",
    "get_card_catalog",
    "search_decks_by_cards",
]
