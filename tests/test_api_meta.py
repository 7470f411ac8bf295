"""Tests for community deck, card statistics and live event endpoints."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

DECK = {"cards": [26000021, 26000014], "winRate": 53.1}


class TestDeckListEndpoints:
    async def test_top_decks(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.decks.fetch_top_decks", new=AsyncMock(return_value=[DECK])
        ) as fetch:
            response = await api_client.get("/decks/top", params={"limit": 5})

        assert response.status_code == 200
        assert response.json() == {"decks": [DECK], "count": 1}
        fetch.assert_awaited_once_with(5)

    async def test_top_decks_default_limit(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.decks.fetch_top_decks", new=AsyncMock(return_value=[])
        ) as fetch:
            response = await api_client.get("/decks/top")

        assert response.json() == {"decks": [], "count": 0}
        fetch.assert_awaited_once_with(20)

    async def test_meta_decks(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.decks.fetch_meta_decks", new=AsyncMock(return_value=[DECK, DECK])
        ) as fetch:
            response = await api_client.get("/decks/meta")

        assert response.json()["count"] == 2
        fetch.assert_awaited_once_with(6000)

    async def test_search_decks(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.decks.search_decks_by_cards", new=AsyncMock(return_value=[DECK])
        ) as search:
            response = await api_client.get("/decks/search", params={"cards": "1,2,3"})

        assert response.status_code == 200
        assert response.json()["count"] == 1
        search.assert_awaited_once_with([1, 2, 3])

    async def test_search_requires_cards(self, api_client: AsyncClient) -> None:
        with patch("clashvision.api.decks.search_decks_by_cards", new=AsyncMock()) as search:
            response = await api_client.get("/decks/search")

        assert response.status_code == 400
        search.assert_not_awaited()

    async def test_search_rejects_non_numeric_ids(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/decks/search", params={"cards": "1,hog"})

        assert response.status_code == 400


class TestCardStatsEndpoint:
    async def test_card_stats(self, api_client: AsyncClient) -> None:
        stats = [{"id": 26000021, "usage": 11.5}]

        with patch("clashvision.api.cards.fetch_card_stats", new=AsyncMock(return_value=stats)):
            response = await api_client.get("/cards/stats")

        assert response.status_code == 200
        assert response.json() == {"stats": stats, "count": 1}


class TestEventEndpoints:
    async def test_challenges(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.events.fetch_challenges",
            new=AsyncMock(return_value=[{"name": "Classic Challenge"}]),
        ):
            response = await api_client.get("/challenges")

        assert response.status_code == 200
        assert response.json() == {"challenges": [{"name": "Classic Challenge"}], "count": 1}

    async def test_tournaments_empty_when_upstream_down(self, api_client: AsyncClient) -> None:
        with patch(
            "clashvision.api.events.fetch_global_tournaments", new=AsyncMock(return_value=[])
        ):
            response = await api_client.get("/tournaments")

        assert response.status_code == 200
        assert response.json() == {"tournaments": [], "count": 0}
