"""Structure store service: one saved spreadsheet structure per game."""

import logging
import re
from pathlib import Path

import aiofiles
from pydantic import ValidationError

from songsheet.config import settings
from songsheet.models.structure import SpreadsheetStructure

logger = logging.getLogger(__name__)

# Game ids double as file names
GAME_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class InvalidGameIdError(ValueError):
    """Raised when a game id cannot be used as a storage key."""

    pass


class StructureStore:
    """Service for persisting spreadsheet structures as JSON files."""

    def __init__(self, storage_path: Path | None = None) -> None:
        """Initialize the structure store.

        Args:
            storage_path: Directory holding one ``<game_id>.json`` per game.
                Defaults to config setting.
        """
        self.storage_path = storage_path or settings.structures_path
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, game_id: str) -> Path:
        """Return the file path for a game id.

        Raises:
            InvalidGameIdError: If the id contains characters outside [A-Za-z0-9_-].
        """
        if not GAME_ID_PATTERN.match(game_id):
            raise InvalidGameIdError(f"Invalid game id: {game_id!r}")
        return self.storage_path / f"{game_id}.json"

    async def save(self, structure: SpreadsheetStructure) -> None:
        """Save (or replace) the structure for its game."""
        file_path = self._path_for(structure.game_id)
        async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
            await f.write(structure.model_dump_json(indent=2))
        logger.info("Saved structure for %s", structure.game_id)

    async def get(self, game_id: str) -> SpreadsheetStructure | None:
        """Load the structure for a game.

        Returns:
            The stored structure, or None if none is stored or it is unreadable.
        """
        file_path = self._path_for(game_id)
        if not file_path.exists():
            return None

        async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
            data = await f.read()
        try:
            return SpreadsheetStructure.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Stored structure for %s is invalid: %s", game_id, e)
            return None

    async def delete(self, game_id: str) -> bool:
        """Delete the structure for a game.

        Returns:
            True if deleted, False if not found.
        """
        file_path = self._path_for(game_id)
        if file_path.exists():
            file_path.unlink()
            logger.info("Deleted structure for %s", game_id)
            return True
        return False

    def list_game_ids(self) -> list[str]:
        """Return the game ids that have a stored structure."""
        return sorted(path.stem for path in self.storage_path.glob("*.json"))
