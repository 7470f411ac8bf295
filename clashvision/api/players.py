"""
Player profile endpoints.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from clashvision.models.failure import NotFoundError
from clashvision.services.player import fetch_player_profile

router = APIRouter(prefix="/players", tags=["players"])


class PlayerCardResponse(BaseModel):
    """A card in the player's current deck."""

    id: int
    name: str
    level: int
    max_level: int
    elixir_cost: float
    rarity: str
    icon_url: str


class PlayerResponse(BaseModel):
    """Response model for a player profile."""

    tag: str
    name: str
    trophies: int
    best_trophies: int
    wins: int
    losses: int
    win_rate: float | None = None
    current_deck: list[PlayerCardResponse] = Field(default_factory=list)
    average_elixir: float = 0.0


@router.get("/{tag}", response_model=PlayerResponse)
async def get_player(tag: str) -> PlayerResponse:
    """
    Get a player's profile and current deck.

    The tag may be given with or without the leading '#'.
    Returns 404 if the player cannot be found.
    """
    profile = await fetch_player_profile(tag)

    if profile is None:
        raise NotFoundError(f"Player '{tag}' not found")

    return PlayerResponse(
        tag=profile.tag,
        name=profile.name,
        trophies=profile.trophies,
        best_trophies=profile.best_trophies,
        wins=profile.wins,
        losses=profile.losses,
        win_rate=profile.win_rate,
        current_deck=[
            PlayerCardResponse(
                id=pc.card.id,
                name=pc.card.name,
                level=pc.level,
                max_level=pc.max_level,
                elixir_cost=pc.card.elixir_cost,
                rarity=pc.card.rarity,
                icon_url=pc.card.icon_url,
            )
            for pc in profile.current_deck
        ],
        average_elixir=profile.average_elixir,
    )
