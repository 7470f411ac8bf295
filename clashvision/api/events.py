"""
Live event endpoints: in-game challenges and global tournaments.
"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from clashvision.services.meta import fetch_challenges, fetch_global_tournaments

router = APIRouter(tags=["events"])


class ChallengeListResponse(BaseModel):
    """Response model for current challenges."""

    challenges: list[dict[str, Any]]
    count: int


class TournamentListResponse(BaseModel):
    """Response model for global tournaments."""

    tournaments: list[dict[str, Any]]
    count: int


@router.get("/challenges", response_model=ChallengeListResponse)
async def list_challenges() -> ChallengeListResponse:
    """Challenges currently scheduled in game."""
    challenges = await fetch_challenges()
    return ChallengeListResponse(challenges=challenges, count=len(challenges))


@router.get("/tournaments", response_model=TournamentListResponse)
async def list_tournaments() -> TournamentListResponse:
    """Global tournaments currently announced."""
    tournaments = await fetch_global_tournaments()
    return TournamentListResponse(tournaments=tournaments, count=len(tournaments))
