"""
Database CRUD operations.

Provides async functions for profiles, saved decks and saved videos.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clashvision.analysis.composition import calculate_average_elixir, detect_deck_archetype
from clashvision.models.card import Card
from clashvision.models.db import ProfileDB, SavedDeckDB, SavedVideoDB

# --- Profile Operations ---


async def get_profile(session: AsyncSession, user_id: str) -> ProfileDB | None:
    """
    Get a user's profile.

    Returns None if the user has no profile yet.
    """
    return await session.get(ProfileDB, user_id)


async def upsert_profile(
    session: AsyncSession,
    user_id: str,
    email: str | None = None,
    full_name: str | None = None,
    avatar_url: str | None = None,
    is_premium: bool | None = None,
    premium_until: datetime | None = None,
) -> ProfileDB:
    """
    Create a profile or update the given fields of an existing one.

    Fields passed as None are left unchanged.
    """
    profile = await get_profile(session, user_id)
    if profile is None:
        profile = ProfileDB(id=user_id, is_premium=False)
        session.add(profile)

    updates: dict[str, Any] = {
        "email": email,
        "full_name": full_name,
        "avatar_url": avatar_url,
        "is_premium": is_premium,
        "premium_until": premium_until,
    }
    for attr, value in updates.items():
        if value is not None:
            setattr(profile, attr, value)

    await session.flush()
    return profile


# --- Saved Deck Operations ---


async def save_deck(
    session: AsyncSession,
    user_id: str,
    cards: list[Card],
    deck_name: str | None = None,
    notes: str | None = None,
    archetype: str | None = None,
) -> SavedDeckDB:
    """
    Save a deck for a user.

    Archetype is classified from the cards when not given; average
    elixir is always computed.
    """
    deck = SavedDeckDB(
        user_id=user_id,
        deck_name=deck_name,
        cards=[card.name for card in cards],
        archetype=archetype or detect_deck_archetype(cards),
        avg_elixir=calculate_average_elixir(cards),
        notes=notes,
    )
    session.add(deck)
    await session.flush()
    return deck


async def get_saved_decks(session: AsyncSession, user_id: str) -> list[SavedDeckDB]:
    """Get a user's saved decks, newest first."""
    result = await session.execute(
        select(SavedDeckDB)
        .where(SavedDeckDB.user_id == user_id)
        .order_by(SavedDeckDB.created_at.desc(), SavedDeckDB.id.desc())
    )
    return list(result.scalars().all())


async def delete_saved_deck(session: AsyncSession, user_id: str, deck_id: int) -> bool:
    """
    Delete one of a user's saved decks.

    Returns True if deleted, False if not found for this user.
    """
    result = await session.execute(
        delete(SavedDeckDB).where(SavedDeckDB.user_id == user_id, SavedDeckDB.id == deck_id)
    )
    return bool(result.rowcount)


# --- Saved Video Operations ---


async def get_saved_video(
    session: AsyncSession, user_id: str, video_id: str
) -> SavedVideoDB | None:
    result = await session.execute(
        select(SavedVideoDB).where(
            SavedVideoDB.user_id == user_id,
            SavedVideoDB.video_id == video_id,
        )
    )
    return result.scalar_one_or_none()


async def save_video(
    session: AsyncSession,
    user_id: str,
    video_id: str,
    title: str | None = None,
    thumbnail: str | None = None,
    timestamp: int | None = None,
    game_type: str | None = None,
    related_deck: list[str] | None = None,
) -> SavedVideoDB:
    """
    Save a video for a user.

    Saving the same video again updates the existing bookmark.
    """
    saved = await get_saved_video(session, user_id, video_id)
    if saved is None:
        saved = SavedVideoDB(user_id=user_id, video_id=video_id)
        session.add(saved)

    saved.title = title
    saved.thumbnail = thumbnail
    saved.timestamp = timestamp
    saved.game_type = game_type
    saved.related_deck = related_deck

    await session.flush()
    return saved


async def get_saved_videos(session: AsyncSession, user_id: str) -> list[SavedVideoDB]:
    """Get a user's saved videos, newest first."""
    result = await session.execute(
        select(SavedVideoDB)
        .where(SavedVideoDB.user_id == user_id)
        .order_by(SavedVideoDB.created_at.desc(), SavedVideoDB.id.desc())
    )
    return list(result.scalars().all())


async def delete_saved_video(session: AsyncSession, user_id: str, video_id: str) -> bool:
    """
    Remove a saved video.

    Returns True if deleted, False if not found.
    """
    saved = await get_saved_video(session, user_id, video_id)
    if saved is None:
        return False

    await session.delete(saved)
    return True
