"""Game schema models: a game and the difficulty tiers its songs carry."""

from pydantic import BaseModel, Field


class DifficultyDefinition(BaseModel):
    """A game-specific difficulty tier."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)  # Display name
    color: str = "#888888"
    order: int = 0
    min_level: int = 1
    max_level: int = 30


class GameSchema(BaseModel):
    """A rhythm game and its ordered difficulty definitions."""

    id: str = Field(..., min_length=1)
    title: str
    description: str | None = None
    difficulties: list[DifficultyDefinition] = Field(default_factory=list)

    def ordered_difficulties(self) -> list[DifficultyDefinition]:
        """Return the difficulties sorted by their declared order (stable)."""
        return sorted(self.difficulties, key=lambda d: d.order)

    def difficulty_ids(self) -> list[str]:
        return [d.id for d in self.ordered_difficulties()]

    def get_difficulty(self, difficulty_id: str) -> DifficultyDefinition | None:
        for difficulty in self.difficulties:
            if difficulty.id == difficulty_id:
                return difficulty
        return None
