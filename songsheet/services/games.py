"""Game registry: built-in rhythm-game presets plus games from config.toml."""

import logging
from typing import Any

from songsheet.config import settings
from songsheet.config.schema import GameConfig
from songsheet.models.game import DifficultyDefinition, GameSchema

logger = logging.getLogger(__name__)

# Predefined games; order defaults to list position
GAME_PRESETS: dict[str, dict[str, Any]] = {
    "bandori": {
        "title": "BanG Dream! Girls Band Party",
        "description": "BanG Dream! Girls Band Party (ガルパ) rhythm game",
        "difficulties": [
            {"id": "EASY", "name": "EASY", "color": "#88c600", "min_level": 5, "max_level": 10},
            {"id": "NORMAL", "name": "NORMAL", "color": "#ffbb00", "min_level": 7, "max_level": 13},
            {"id": "HARD", "name": "HARD", "color": "#ff7800", "min_level": 11, "max_level": 18},
            {"id": "EXPERT", "name": "EXPERT", "color": "#ff0000", "min_level": 16, "max_level": 26},
            {"id": "SPECIAL", "name": "SPECIAL", "color": "#bb00bb", "min_level": 20, "max_level": 32},
        ],
    },
    "pjsekai": {
        "title": "プロジェクトセカイ",
        "description": "プロジェクトセカイ カラフルステージ！ feat. 初音ミク",
        "difficulties": [
            {"id": "EASY", "name": "EASY", "color": "#79cc55", "min_level": 3, "max_level": 9},
            {"id": "NORMAL", "name": "NORMAL", "color": "#4780cc", "min_level": 6, "max_level": 14},
            {"id": "HARD", "name": "HARD", "color": "#ff9d45", "min_level": 10, "max_level": 21},
            {"id": "EXPERT", "name": "EXPERT", "color": "#ff606a", "min_level": 17, "max_level": 30},
            {"id": "MASTER", "name": "MASTER", "color": "#d566dd", "min_level": 24, "max_level": 38},
        ],
    },
    "lovelive": {
        "title": "ラブライブ！スクールアイドルフェスティバル",
        "description": "ラブライブ！シリーズのスマートフォン向けリズムゲーム",
        "difficulties": [
            {"id": "EASY", "name": "EASY", "color": "#81c04b", "min_level": 1, "max_level": 5},
            {"id": "NORMAL", "name": "NORMAL", "color": "#4472c4", "min_level": 4, "max_level": 9},
            {"id": "HARD", "name": "HARD", "color": "#ff9a3e", "min_level": 6, "max_level": 11},
            {"id": "EXPERT", "name": "EXPERT", "color": "#de2e42", "min_level": 9, "max_level": 12},
            {"id": "MASTER", "name": "MASTER", "color": "#ba44bd", "min_level": 10, "max_level": 14},
        ],
    },
    "deresute": {
        "title": "デレステ",
        "description": "アイドルマスター シンデレラガールズ スターライトステージ",
        "difficulties": [
            {"id": "DEBUT", "name": "DEBUT", "color": "#5aad6d", "min_level": 1, "max_level": 6},
            {"id": "REGULAR", "name": "REGULAR", "color": "#3871c1", "min_level": 5, "max_level": 12},
            {"id": "PRO", "name": "PRO", "color": "#e25b36", "min_level": 10, "max_level": 17},
            {"id": "MASTER", "name": "MASTER", "color": "#ba34ad", "min_level": 15, "max_level": 25},
            {"id": "MASTER_PLUS", "name": "MASTER+", "color": "#ba34ad", "min_level": 19, "max_level": 32},
        ],
    },
    "chunithm": {
        "title": "CHUNITHM",
        "description": "SEGA arcade rhythm game",
        "difficulties": [
            {"id": "BASIC", "name": "BASIC", "color": "#18ae60", "min_level": 1, "max_level": 7},
            {"id": "ADVANCED", "name": "ADVANCED", "color": "#f0a02c", "min_level": 3, "max_level": 10},
            {"id": "EXPERT", "name": "EXPERT", "color": "#f13750", "min_level": 7, "max_level": 13},
            {"id": "MASTER", "name": "MASTER", "color": "#9932cc", "min_level": 10, "max_level": 14},
            {"id": "ULTIMA", "name": "ULTIMA", "color": "#000000", "min_level": 14, "max_level": 15},
            {"id": "WORLD_END", "name": "WORLD'S END", "color": "#0080ff", "min_level": 1, "max_level": 7},
        ],
    },
}


def build_game_schema(
    game_id: str,
    title: str,
    difficulties: list[dict[str, Any]],
    description: str | None = None,
) -> GameSchema:
    """Build a GameSchema, filling in difficulty defaults.

    Args:
        game_id: Game identifier.
        title: Display title.
        difficulties: Dicts with at least ``id``; ``name`` defaults to the id,
            ``order`` to the list position, levels to 1..30.
        description: Optional description.

    Returns:
        The game schema.
    """
    definitions = []
    for index, entry in enumerate(difficulties):
        values = {k: v for k, v in entry.items() if v is not None}
        values.setdefault("name", values["id"])
        values.setdefault("order", index)
        definitions.append(DifficultyDefinition(**values))
    return GameSchema(id=game_id, title=title, description=description, difficulties=definitions)


def _from_config(game_id: str, game: GameConfig) -> GameSchema:
    return build_game_schema(
        game_id,
        game.title,
        [d.model_dump() for d in game.difficulties],
        game.description,
    )


def get_game(game_id: str) -> GameSchema | None:
    """Look up a game; games declared in config.toml override presets."""
    configured = settings.games.get(game_id)
    if configured is not None:
        return _from_config(game_id, configured)
    preset = GAME_PRESETS.get(game_id)
    if preset is None:
        logger.debug("Unknown game: %s", game_id)
        return None
    return build_game_schema(
        game_id,
        preset["title"],
        preset["difficulties"],
        preset.get("description"),
    )


def list_games() -> list[GameSchema]:
    """Return every known game, presets first, sorted by id within each group."""
    game_ids = sorted(GAME_PRESETS) + sorted(set(settings.games) - set(GAME_PRESETS))
    return [game for game in (get_game(game_id) for game_id in game_ids) if game is not None]
