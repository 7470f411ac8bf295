"""
Deck analysis endpoints.

Classifies a selected deck (role composition, archetype, weaknesses) and
lists popular and meta decks from community statistics.
"""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from clashvision.analysis.composition import analyze_deck
from clashvision.models.card import Card
from clashvision.models.deck import create_deck
from clashvision.services.meta import (
    DEFAULT_META_MIN_TROPHIES,
    DEFAULT_TOP_DECK_LIMIT,
    fetch_meta_decks,
    fetch_top_decks,
    search_decks_by_cards,
)

router = APIRouter(prefix="/decks", tags=["decks"])


class CardPayload(BaseModel):
    """A card as sent by the deck builder."""

    id: int
    name: str
    elixir_cost: float = 0
    rarity: str = "common"
    icon_url: str = ""

    def to_card(self) -> Card:
        return Card(
            id=self.id,
            name=self.name,
            elixir_cost=self.elixir_cost,
            rarity=self.rarity,
            icon_url=self.icon_url,
        )


class DeckRequest(BaseModel):
    """Request model carrying a deck selection."""

    cards: list[CardPayload] = Field(
        ...,
        description="Exactly 8 distinct cards",
        examples=[[{"id": 26000021, "name": "Hog Rider", "elixir_cost": 4}]],
    )

    def to_cards(self) -> list[Card]:
        return [payload.to_card() for payload in self.cards]


class CompositionResponse(BaseModel):
    """Card role counts."""

    troops: int
    spells: int
    buildings: int
    win_conditions: int
    supports: int
    avg_elixir: float


class DeckListResponse(BaseModel):
    """Response model for community deck lists."""

    decks: list[dict[str, Any]]
    count: int


class DeckAnalysisResponse(BaseModel):
    """Response model for deck analysis."""

    composition: CompositionResponse
    archetype: str
    counters: list[str] = Field(default_factory=list)
    avg_elixir: float


@router.post("/analyze", response_model=DeckAnalysisResponse)
async def analyze(request: DeckRequest) -> DeckAnalysisResponse:
    """
    Analyze a deck's composition, archetype and counters.

    Returns 400 if the deck is not exactly 8 distinct cards.
    """
    deck = create_deck(request.to_cards())
    analysis = analyze_deck(deck.cards)
    composition = analysis.composition

    return DeckAnalysisResponse(
        composition=CompositionResponse(
            troops=composition.troops,
            spells=composition.spells,
            buildings=composition.buildings,
            win_conditions=composition.win_conditions,
            supports=composition.supports,
            avg_elixir=composition.avg_elixir,
        ),
        archetype=analysis.archetype,
        counters=analysis.counters,
        avg_elixir=analysis.avg_elixir,
    )


@router.get("/top", response_model=DeckListResponse)
async def top_decks(
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_TOP_DECK_LIMIT,
) -> DeckListResponse:
    """Most popular decks. Empty when the statistics source is down."""
    decks = await fetch_top_decks(limit)
    return DeckListResponse(decks=decks, count=len(decks))


@router.get("/meta", response_model=DeckListResponse)
async def meta_decks(
    min_trophies: Annotated[int, Query(ge=0)] = DEFAULT_META_MIN_TROPHIES,
) -> DeckListResponse:
    """Decks played above a trophy threshold over the last 7 days."""
    decks = await fetch_meta_decks(min_trophies)
    return DeckListResponse(decks=decks, count=len(decks))


@router.get("/search", response_model=DeckListResponse)
async def search_decks(cards: str | None = None) -> DeckListResponse:
    """
    Find decks containing the given cards (comma-separated card ids).

    Returns 400 if cards is missing or holds a non-numeric id.
    """
    if not cards:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'cards' is required",
        )

    try:
        card_ids = [int(part) for part in cards.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'cards' must be comma-separated card ids",
        ) from None

    decks = await search_decks_by_cards(card_ids)
    return DeckListResponse(decks=decks, count=len(decks))
