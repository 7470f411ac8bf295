"""
Meta-game data: popular decks, card usage and live events.

Deck and card statistics come from RoyaleAPI; challenges and global
tournaments from the official API. Payloads are passed through as
returned. Every lookup returns an empty list when the upstream fails.
"""

import logging
from typing import Any

import httpx

from clashvision.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TOP_DECK_LIMIT = 20
DEFAULT_META_MIN_TROPHIES = 6000
META_TIME_MODE = "7d"


def _official_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {settings.clash_royale_api_key}"}


def _as_list(data: Any, key: str | None = None) -> list[dict[str, Any]]:
    """
    Pull the list out of a response body.

    Raises:
        KeyError, TypeError: If the body has no list where one is expected
    """
    items = data[key] if key is not None else data
    if not isinstance(items, list):
        raise TypeError(f"expected a list, got {type(items).__name__}")
    return items


async def _fetch_list(
    what: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    key: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[dict[str, Any]]:
    try:
        if client is not None:
            response = await client.get(url, params=params, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
                response = await http.get(url, params=params, headers=headers)
        response.raise_for_status()
        return _as_list(response.json(), key)
    except httpx.HTTPError as e:
        logger.warning("Fetching %s failed: %s", what, e)
        return []
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed %s response: %s", what, e)
        return []


async def fetch_top_decks(
    limit: int = DEFAULT_TOP_DECK_LIMIT, client: httpx.AsyncClient | None = None
) -> list[dict[str, Any]]:
    """Most popular decks right now."""
    return await _fetch_list(
        "top decks",
        f"{settings.royaleapi_stats_base}/decks/popular",
        params={"limit": limit},
        client=client,
    )


async def fetch_meta_decks(
    min_trophies: int = DEFAULT_META_MIN_TROPHIES, client: httpx.AsyncClient | None = None
) -> list[dict[str, Any]]:
    """Decks played above a trophy threshold over the last 7 days."""
    return await _fetch_list(
        "meta decks",
        f"{settings.royaleapi_stats_base}/decks/meta",
        params={"min_trophies": min_trophies, "time_mode": META_TIME_MODE},
        client=client,
    )


async def search_decks_by_cards(
    card_ids: list[int], client: httpx.AsyncClient | None = None
) -> list[dict[str, Any]]:
    """Decks containing every one of the given cards."""
    return await _fetch_list(
        "deck search",
        f"{settings.royaleapi_stats_base}/decks/search",
        params={"cards": ",".join(str(card_id) for card_id in card_ids)},
        client=client,
    )


async def fetch_card_stats(client: httpx.AsyncClient | None = None) -> list[dict[str, Any]]:
    """Usage and win rates per card."""
    return await _fetch_list(
        "card stats",
        f"{settings.royaleapi_stats_base}/cards/stats",
        client=client,
    )


async def fetch_challenges(client: httpx.AsyncClient | None = None) -> list[dict[str, Any]]:
    """Challenges currently scheduled in game."""
    return await _fetch_list(
        "challenges",
        f"{settings.clash_royale_api_base}/challenges",
        headers=_official_headers(),
        key="items",
        client=client,
    )


async def fetch_global_tournaments(
    client: httpx.AsyncClient | None = None,
) -> list[dict[str, Any]]:
    """Global tournaments currently announced."""
    return await _fetch_list(
        "global tournaments",
        f"{settings.clash_royale_api_base}/globaltournaments",
        headers=_official_headers(),
        key="items",
        client=client,
    )
