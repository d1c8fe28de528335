"""Game registry API router."""

from fastapi import APIRouter, HTTPException

from songsheet.models.game import GameSchema
from songsheet.services.games import get_game, list_games

router = APIRouter()


@router.get("", response_model=list[GameSchema])
async def list_all_games() -> list[GameSchema]:
    """List every known game with its difficulty definitions."""
    return list_games()


@router.get("/{game_id}", response_model=GameSchema)
async def get_game_by_id(game_id: str) -> GameSchema:
    """Get a specific game by ID."""
    game = get_game(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game
