"""
Card catalog endpoints.

Serves the normalized card list used by the deck builder, including
derived evolution variants.
"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from clashvision.models.card import Card
from clashvision.models.failure import NotFoundError
from clashvision.services.card_catalog import get_card_catalog
from clashvision.services.meta import fetch_card_stats

router = APIRouter(prefix="/cards", tags=["cards"])


class CardResponse(BaseModel):
    """Response model for a single card."""

    id: int
    name: str
    elixir_cost: float
    rarity: str
    icon_url: str
    is_evolution: bool = False

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            elixir_cost=card.elixir_cost,
            rarity=card.rarity,
            icon_url=card.icon_url,
            is_evolution=card.is_evolution,
        )


class CardListResponse(BaseModel):
    """Response model for the card catalog."""

    cards: list[CardResponse]
    count: int


class CardStatsResponse(BaseModel):
    """Response model for per-card usage statistics."""

    stats: list[dict[str, Any]]
    count: int


@router.get("", response_model=CardListResponse)
async def list_cards(include_evolutions: bool = True) -> CardListResponse:
    """
    Get every card in the catalog.

    Returns 503 if the catalog cannot be loaded from any source.
    """
    catalog = await get_card_catalog()
    cards = [
        CardResponse.from_card(card)
        for card in catalog.cards
        if include_evolutions or not card.is_evolution
    ]
    return CardListResponse(cards=cards, count=len(cards))


@router.get("/stats", response_model=CardStatsResponse)
async def card_stats() -> CardStatsResponse:
    """Usage and win rates per card. Empty when the statistics source is down."""
    stats = await fetch_card_stats()
    return CardStatsResponse(stats=stats, count=len(stats))


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(card_id: int) -> CardResponse:
    """Get a single card by id. Returns 404 if unknown."""
    catalog = await get_card_catalog()
    card = catalog.get(card_id)

    if card is None:
        raise NotFoundError(f"Card {card_id} not found")

    return CardResponse.from_card(card)
