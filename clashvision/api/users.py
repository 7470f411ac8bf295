"""
Dashboard endpoints for a user's profile and saved items.

Authentication is handled upstream; the user id arrives in the path.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from clashvision.api.decks import CardPayload
from clashvision.db import (
    delete_saved_deck,
    delete_saved_video,
    get_profile,
    get_saved_decks,
    get_saved_videos,
    save_deck,
    save_video,
    upsert_profile,
)
from clashvision.db.database import get_session
from clashvision.models.db import ProfileDB, SavedDeckDB, SavedVideoDB
from clashvision.models.deck import create_deck
from clashvision.models.failure import NotFoundError

router = APIRouter(prefix="/users", tags=["users"])


class ProfileResponse(BaseModel):
    """Response model for a user profile."""

    user_id: str
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    is_premium: bool = False
    premium_until: datetime | None = None

    @classmethod
    def from_db(cls, profile: ProfileDB) -> "ProfileResponse":
        return cls(
            user_id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            avatar_url=profile.avatar_url,
            is_premium=profile.is_premium,
            premium_until=profile.premium_until,
        )


class ProfileUpdateRequest(BaseModel):
    """Request model for profile updates. Omitted fields are unchanged."""

    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


class SavedDeckRequest(BaseModel):
    """Request model for saving a deck."""

    cards: list[CardPayload] = Field(..., description="Exactly 8 distinct cards")
    deck_name: str | None = None
    notes: str | None = None


class SavedDeckResponse(BaseModel):
    """Response model for a saved deck."""

    id: int
    deck_name: str | None = None
    cards: list[str] = Field(default_factory=list)
    archetype: str | None = None
    avg_elixir: float | None = None
    notes: str | None = None

    @classmethod
    def from_db(cls, deck: SavedDeckDB) -> "SavedDeckResponse":
        return cls(
            id=deck.id,
            deck_name=deck.deck_name,
            cards=list(deck.cards or []),
            archetype=deck.archetype,
            avg_elixir=deck.avg_elixir,
            notes=deck.notes,
        )


class SavedVideoRequest(BaseModel):
    """Request model for saving a video."""

    video_id: str
    title: str | None = None
    thumbnail: str | None = None
    timestamp: int | None = Field(default=None, ge=0, description="Start time in seconds")
    game_type: str | None = "clash_royale"
    related_deck: list[str] | None = None


class SavedVideoResponse(BaseModel):
    """Response model for a saved video."""

    video_id: str
    title: str | None = None
    thumbnail: str | None = None
    timestamp: int | None = None
    game_type: str | None = None
    related_deck: list[str] | None = None

    @classmethod
    def from_db(cls, video: SavedVideoDB) -> "SavedVideoResponse":
        return cls(
            video_id=video.video_id,
            title=video.title,
            thumbnail=video.thumbnail,
            timestamp=video.timestamp,
            game_type=video.game_type,
            related_deck=video.related_deck,
        )


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    user_id: str
    deleted: bool


# --- Profile ---


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def read_profile(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProfileResponse:
    """Get a user's profile. Returns 404 if none exists."""
    profile = await get_profile(session, user_id)

    if profile is None:
        raise NotFoundError(f"No profile found for user '{user_id}'")

    return ProfileResponse.from_db(profile)


@router.put("/{user_id}/profile", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    request: ProfileUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProfileResponse:
    """Create or update a user's profile."""
    profile = await upsert_profile(
        session,
        user_id,
        email=request.email,
        full_name=request.full_name,
        avatar_url=request.avatar_url,
    )
    return ProfileResponse.from_db(profile)


# --- Saved decks ---


@router.get("/{user_id}/decks", response_model=list[SavedDeckResponse])
async def list_saved_decks(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[SavedDeckResponse]:
    """Get a user's saved decks, newest first."""
    decks = await get_saved_decks(session, user_id)
    return [SavedDeckResponse.from_db(d) for d in decks]


@router.post(
    "/{user_id}/decks",
    response_model=SavedDeckResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_saved_deck(
    user_id: str,
    request: SavedDeckRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SavedDeckResponse:
    """
    Save a deck.

    Returns 400 if the deck is not exactly 8 distinct cards.
    """
    deck = create_deck(payload.to_card() for payload in request.cards)
    saved = await save_deck(
        session,
        user_id,
        list(deck.cards),
        deck_name=request.deck_name,
        notes=request.notes,
    )
    return SavedDeckResponse.from_db(saved)


@router.delete("/{user_id}/decks/{deck_id}", response_model=DeleteResponse)
async def remove_saved_deck(
    user_id: str,
    deck_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Delete a saved deck. Returns 404 if not found."""
    deleted = await delete_saved_deck(session, user_id, deck_id)

    if not deleted:
        raise NotFoundError(f"Saved deck {deck_id} not found")

    return DeleteResponse(user_id=user_id, deleted=True)


# --- Saved videos ---


@router.get("/{user_id}/videos", response_model=list[SavedVideoResponse])
async def list_saved_videos(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[SavedVideoResponse]:
    """Get a user's saved videos, newest first."""
    videos = await get_saved_videos(session, user_id)
    return [SavedVideoResponse.from_db(v) for v in videos]


@router.post("/{user_id}/videos", response_model=SavedVideoResponse)
async def create_saved_video(
    user_id: str,
    request: SavedVideoRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SavedVideoResponse:
    """Save a video. Saving the same video again updates it."""
    saved = await save_video(
        session,
        user_id,
        request.video_id,
        title=request.title,
        thumbnail=request.thumbnail,
        timestamp=request.timestamp,
        game_type=request.game_type,
        related_deck=request.related_deck,
    )
    return SavedVideoResponse.from_db(saved)


@router.delete("/{user_id}/videos/{video_id}", response_model=DeleteResponse)
async def remove_saved_video(
    user_id: str,
    video_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Remove a saved video. Returns 404 if not found."""
    deleted = await delete_saved_video(session, user_id, video_id)

    if not deleted:
        raise NotFoundError(f"Saved video '{video_id}' not found")

    return DeleteResponse(user_id=user_id, deleted=True)
