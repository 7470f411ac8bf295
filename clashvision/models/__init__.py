from clashvision.models.card import Card, make_evolution, strip_evolution_suffix
from clashvision.models.deck import Deck, create_deck
from clashvision.models.failure import (
    ApiResponse,
    CatalogUnavailableError,
    DeckValidationError,
    FailureDetail,
    FailureKind,
    KnownError,
    NotFoundError,
    OutcomeType,
)
from clashvision.models.video import (
    PriorityTier,
    ResultOrder,
    ScoredVideo,
    SearchStrategy,
    VideoCandidate,
    VideoRankingResult,
)

__all__ = [
    "ApiResponse",
    "Card",
    "CatalogUnavailableError",
    "Deck",
    "DeckValidationError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "NotFoundError",
    "OutcomeType",
    "PriorityTier",
    "ResultOrder",
    "ScoredVideo",
    "SearchStrategy",
    "VideoCandidate",
    "VideoRankingResult",
    "create_deck",
    "make_evolution",
    "strip_evolution_suffix",
]
