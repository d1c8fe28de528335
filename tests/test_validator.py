"""Tests for song validation."""

from songsheet.models.song import DifficultyInfo, SongRecord
from songsheet.services.games import get_game
from songsheet.services.validator import validate_songs


def _song(song_no: int, name: str, **levels) -> SongRecord:
    difficulties = {
        difficulty_id: DifficultyInfo(level=level, combo=100 if level is not None else None)
        for difficulty_id, level in levels.items()
    }
    return SongRecord(
        id=f"testgame_{song_no}",
        game_id="testgame",
        song_no=song_no,
        name=name,
        difficulties=difficulties,
    )


def _types(issues) -> set[tuple[str, str, str]]:
    return {(i.field_path, i.issue_type, i.severity) for i in issues}


def test_clean_songs(game) -> None:
    songs = [_song(1, "A", EASY=5, NORMAL=8), _song(2, "B", EASY=3, NORMAL=9)]
    assert validate_songs(songs, game) == []


def test_empty_title_is_error(game) -> None:
    issues = validate_songs([_song(1, " ")], game)
    assert ("name", "missing", "error") in _types(issues)


def test_placeholder_title_is_warning(game) -> None:
    issues = validate_songs([_song(1, "Untitled (row 1)")], game)
    assert _types(issues) == {("name", "missing", "warning")}


def test_level_out_of_range(game) -> None:
    """Test levels are checked against each difficulty's own range."""
    issues = validate_songs([_song(1, "A", EASY=11)], game)
    assert ("difficulties.EASY.level", "invalid", "warning") in _types(issues)

    issues = validate_songs([_song(1, "A", EXPERT=28)], game)
    assert issues == []


def test_level_without_combo(game) -> None:
    song = _song(1, "A", EASY=5)
    song.difficulties["EASY"].combo = None
    issues = validate_songs([song], game)
    assert _types(issues) == {("difficulties.EASY.combo", "missing", "warning")}


def test_invalid_video_url(game) -> None:
    song = _song(1, "A")
    song.difficulties["EASY"] = DifficultyInfo(video_url="https://example.com/watch")
    issues = validate_songs([song], game)
    assert _types(issues) == {("difficulties.EASY.video_url", "invalid", "warning")}


def test_cross_difficulty_order(game) -> None:
    """Test a harder difficulty with a lower level is flagged."""
    issues = validate_songs([_song(1, "A", EASY=8, NORMAL=6, HARD=12)], game)
    assert _types(issues) == {("difficulties.NORMAL.level", "inconsistent", "warning")}


def test_duplicate_titles(game) -> None:
    issues = validate_songs([_song(1, "Same"), _song(2, "same ")], game)
    duplicates = [i for i in issues if i.issue_type == "duplicate"]
    assert len(duplicates) == 2
    assert all(i.severity == "warning" for i in duplicates)


def test_duplicate_song_numbers(game) -> None:
    issues = validate_songs([_song(7, "A"), _song(7, "B")], game)
    assert _types(issues) == {("song_no", "duplicate", "error")}
    assert len(issues) == 2


def test_out_of_band_tier_not_ordered() -> None:
    """Test a tier whose range sits below the ladder is not compared with it."""
    chunithm = get_game("chunithm")
    song = SongRecord(
        id="chunithm_1",
        game_id="chunithm",
        song_no=1,
        name="A",
        difficulties={
            "BASIC": DifficultyInfo(level=3, combo=300),
            "MASTER": DifficultyInfo(level=13, combo=1500),
            "WORLD_END": DifficultyInfo(level=5, combo=1200),
        },
    )
    assert validate_songs([song], chunithm) == []
