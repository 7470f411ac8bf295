from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from clashvision.db.database import get_session
from clashvision.main import app
from clashvision.models.card import Card, make_evolution
from clashvision.models.db import Base
from clashvision.models.deck import Deck, create_deck
from clashvision.models.video import VideoCandidate
from clashvision.services import card_catalog

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_catalog_cache():
    """Clear the cached card catalog between tests."""
    card_catalog.reset_card_catalog()
    yield
    card_catalog.reset_card_catalog()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def hog_cycle_cards() -> list[Card]:
    """Classic Hog Rider cycle deck (4 cards at 2 elixir or less)."""
    return [
        Card(id=26000021, name="Hog Rider", elixir_cost=4, rarity="rare"),
        Card(id=26000014, name="Musketeer", elixir_cost=4, rarity="rare"),
        Card(id=26000030, name="Ice Spirit", elixir_cost=1),
        Card(id=26000010, name="Skeletons", elixir_cost=1),
        Card(id=27000000, name="Cannon", elixir_cost=3),
        Card(id=28000000, name="Fireball", elixir_cost=4, rarity="rare"),
        Card(id=28000011, name="The Log", elixir_cost=2, rarity="legendary"),
        Card(id=26000084, name="Electro Spirit", elixir_cost=1),
    ]


@pytest.fixture
def hog_deck(hog_cycle_cards: list[Card]) -> Deck:
    return create_deck(hog_cycle_cards)


@pytest.fixture
def evolution_deck(hog_cycle_cards: list[Card]) -> Deck:
    """Hog cycle with the Skeletons slot swapped for its evolution."""
    cards = list(hog_cycle_cards)
    cards[3] = make_evolution(cards[3])
    return create_deck(cards)


def _build_video(
    video_id: str,
    title: str = "",
    description: str = "",
    channel_title: str = "Some Creator",
    published_at: datetime | None = None,
) -> VideoCandidate:
    """Build a candidate with sensible defaults."""
    return VideoCandidate(
        id=video_id,
        title=title,
        description=description,
        channel_title=channel_title,
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
        published_at=published_at or datetime(2025, 1, 15, tzinfo=UTC),
    )


@pytest.fixture
def make_video():
    """Factory for search candidates."""
    return _build_video


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def api_client(db_engine):
    """HTTP client for the app, with the session bound to the test database."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = test_session

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def deck_payload(hog_cycle_cards: list[Card]) -> dict:
    """Request body for endpoints that take a deck."""
    return {
        "cards": [
            {"id": c.id, "name": c.name, "elixir_cost": c.elixir_cost, "rarity": c.rarity}
            for c in hog_cycle_cards
        ]
    }
