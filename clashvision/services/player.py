"""
Player profile lookup against the official Clash Royale API.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from clashvision.analysis.composition import calculate_average_elixir
from clashvision.config import settings
from clashvision.models.card import Card

logger = logging.getLogger(__name__)


@dataclass
class PlayerCard:
    """A card in a player's current deck, with its level."""

    card: Card
    level: int
    max_level: int


@dataclass
class PlayerProfile:
    """Public profile of a player."""

    tag: str
    name: str
    trophies: int
    best_trophies: int
    wins: int
    losses: int
    current_deck: list[PlayerCard] = field(default_factory=list)

    @property
    def average_elixir(self) -> float:
        return calculate_average_elixir([pc.card for pc in self.current_deck])

    @property
    def win_rate(self) -> float | None:
        games = self.wins + self.losses
        return self.wins / games if games else None


def clean_player_tag(tag: str) -> str:
    """Strip whitespace and the leading '#' from a player tag."""
    return tag.strip().lstrip("#").upper()


def parse_player_profile(data: dict[str, Any]) -> PlayerProfile:
    """
    Build a PlayerProfile from the API response body.

    Raises:
        KeyError: If required fields are missing
    """
    deck = [
        PlayerCard(
            card=Card(
                id=int(raw["id"]),
                name=raw["name"],
                elixir_cost=raw.get("elixirCost") or 0,
                rarity=(raw.get("rarity") or "common").lower(),
                icon_url=(raw.get("iconUrls") or {}).get("medium", ""),
            ),
            level=raw.get("level", 1),
            max_level=raw.get("maxLevel", raw.get("level", 1)),
        )
        for raw in data.get("currentDeck", [])
    ]

    return PlayerProfile(
        tag=data["tag"],
        name=data["name"],
        trophies=data.get("trophies", 0),
        best_trophies=data.get("bestTrophies", 0),
        wins=data.get("wins", 0),
        losses=data.get("losses", 0),
        current_deck=deck,
    )


async def fetch_player_profile(
    tag: str, client: httpx.AsyncClient | None = None
) -> PlayerProfile | None:
    """
    Fetch a player's profile and current deck.

    Returns:
        PlayerProfile, or None if the player is unknown or the API fails
    """
    url = f"{settings.clash_royale_api_base}/players/%23{clean_player_tag(tag)}"
    headers = {"Authorization": f"Bearer {settings.clash_royale_api_key}"}

    try:
        if client is not None:
            response = await client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
                response = await http.get(url, headers=headers)
        response.raise_for_status()
        return parse_player_profile(response.json())
    except httpx.HTTPError as e:
        logger.warning("Player lookup failed for %s: %s", tag, e)
        return None
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed player response for %s: %s", tag, e)
        return None
