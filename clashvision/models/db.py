"""
SQLAlchemy ORM models for persistent storage.

Backs the dashboard: user profiles, saved decks and saved videos.
Ranking results are never stored.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileDB(Base):
    """
    A user's dashboard profile.

    The id is the user id issued by the external auth service.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
    premium_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<ProfileDB(id={self.id}, email={self.email})>"


class SavedDeckDB(Base):
    """A deck a user saved from the deck builder."""

    __tablename__ = "saved_decks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    deck_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Ordered card names
    cards: Mapped[list[Any]] = mapped_column(JSON, default=list)

    archetype: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avg_elixir: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<SavedDeckDB(id={self.id}, user_id={self.user_id}, name={self.deck_name})>"


class SavedVideoDB(Base):
    """A video a user bookmarked, optionally at a timestamp."""

    __tablename__ = "saved_videos"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_user_video"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    video_id: Mapped[str] = mapped_column(String(64))
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    game_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    related_deck: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<SavedVideoDB(user_id={self.user_id}, video_id={self.video_id})>"
