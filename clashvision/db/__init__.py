from clashvision.db.database import get_session, init_db
from clashvision.db.operations import (
    delete_saved_deck,
    delete_saved_video,
    get_profile,
    get_saved_decks,
    get_saved_video,
    get_saved_videos,
    save_deck,
    save_video,
    upsert_profile,
)

__all__ = [
    "delete_saved_deck",
    "delete_saved_video",
    "get_profile",
    "get_saved_decks",
    "get_saved_video",
    "get_saved_videos",
    "get_session",
    "init_db",
    "save_deck",
    "save_video",
    "upsert_profile",
]
