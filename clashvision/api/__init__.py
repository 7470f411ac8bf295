from clashvision.api.cards import router as cards_router
from clashvision.api.decks import router as decks_router
from clashvision.api.events import router as events_router
from clashvision.api.health import router as health_router
from clashvision.api.players import router as players_router
from clashvision.api.users import router as users_router
from clashvision.api.videos import router as videos_router

__all__ = [
    "cards_router",
    "decks_router",
    "events_router",
    "health_router",
    "players_router",
    "users_router",
    "videos_router",
]
