"""
Card catalog service.

Loads the game's card list and normalizes it into Card objects, adding
a derived evolution variant for every card that has evolution artwork.

Sources, in order:
1. Local JSON cache written by `python -m clashvision.jobs.download_cards`
2. Official Clash Royale API (bearer token)
3. RoyaleAPI public card list
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from clashvision.config import settings
from clashvision.models.card import Card, make_evolution
from clashvision.models.failure import CatalogUnavailableError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "cards.json"


def normalize_card(raw: dict[str, Any]) -> Card:
    """
    Convert a raw API card into a Card.

    Raises:
        KeyError: If id or name is missing
    """
    icons = raw.get("iconUrls") or {}
    return Card(
        id=int(raw["id"]),
        name=str(raw["name"]),
        elixir_cost=raw.get("elixirCost") or 0,
        rarity=(raw.get("rarity") or "common").lower(),
        icon_url=icons.get("medium", ""),
    )


class CardCatalog:
    """
    Normalized card lookup keyed by card id.

    Evolution variants are stored alongside base cards under their
    synthesized ids.
    """

    def __init__(self, cards: list[Card]) -> None:
        self._by_id: dict[int, Card] = {card.id: card for card in cards}

    def __len__(self) -> int:
        return len(self._by_id)

    @property
    def cards(self) -> list[Card]:
        """All cards, base and evolution, in catalog order."""
        return list(self._by_id.values())

    def get(self, card_id: int) -> Card | None:
        return self._by_id.get(card_id)


def build_catalog(raw_cards: list[dict[str, Any]]) -> CardCatalog:
    """
    Build a catalog from raw API cards.

    Entries without an id or name are skipped.
    """
    cards: list[Card] = []
    evolutions: list[Card] = []

    for raw in raw_cards:
        try:
            card = normalize_card(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed card entry: %r", raw)
            continue

        cards.append(card)

        evolution_icon = (raw.get("iconUrls") or {}).get("evolutionMedium")
        if evolution_icon:
            evolutions.append(make_evolution(card, icon_url=evolution_icon))

    return CardCatalog(cards + evolutions)


async def fetch_raw_cards(client: httpx.AsyncClient | None = None) -> list[dict[str, Any]]:
    """
    Fetch the raw card list, falling back to RoyaleAPI.

    Raises:
        CatalogUnavailableError: If both sources fail
    """
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.request_timeout)

    try:
        try:
            response = await http.get(
                f"{settings.clash_royale_api_base}/cards",
                headers={"Authorization": f"Bearer {settings.clash_royale_api_key}"},
            )
            response.raise_for_status()
            return list(response.json()["items"])
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("Official card API failed, trying RoyaleAPI: %s", e)

        try:
            response = await http.get(f"{settings.royaleapi_base}/cards")
            response.raise_for_status()
            data = response.json()
            return list(data["items"] if isinstance(data, dict) else data)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("RoyaleAPI card list failed: %s", e)
            raise CatalogUnavailableError(detail=type(e).__name__) from e
    finally:
        if owns_client:
            await http.aclose()


def save_raw_cards(raw_cards: list[dict[str, Any]], path: Path | None = None) -> Path:
    """Write the raw card list to the local cache file."""
    path = path or DEFAULT_CATALOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(raw_cards, f)
    return path


def load_raw_cards(path: Path | None = None) -> list[dict[str, Any]]:
    """
    Read the raw card list from the local cache file.

    Raises:
        FileNotFoundError: If the cache file doesn't exist
    """
    path = path or DEFAULT_CATALOG_PATH
    with open(path, encoding="utf-8") as f:
        return list(json.load(f))


_catalog: CardCatalog | None = None


async def get_card_catalog() -> CardCatalog:
    """
    Get the cached card catalog, loading it on first use.

    Raises:
        CatalogUnavailableError: If no source can provide the card list
    """
    global _catalog
    if _catalog is None:
        try:
            raw_cards = load_raw_cards()
            logger.info("Loaded %d cards from %s", len(raw_cards), DEFAULT_CATALOG_PATH)
        except FileNotFoundError:
            raw_cards = await fetch_raw_cards()
            logger.info("Fetched %d cards from card API", len(raw_cards))
        _catalog = build_catalog(raw_cards)
    return _catalog


def reset_card_catalog() -> None:
    """Drop the cached catalog (used by tests and after a refresh)."""
    global _catalog
    _catalog = None
