"""Song record models produced by row extraction."""

from datetime import date

from pydantic import BaseModel, Field


class DifficultyInfo(BaseModel):
    """Level, combo count and video link of one difficulty of a song."""

    level: int | float | None = None
    combo: int | None = None
    video_url: str | None = None


class SongInfo(BaseModel):
    """Optional song metadata."""

    artist: str | None = None
    lyricist: str | None = None
    composer: str | None = None
    arranger: str | None = None
    duration: str | None = None  # "MM:SS"
    bpm: int | float | None = None
    added_date: date | None = None
    tags: list[str] | None = None


class SongRecord(BaseModel):
    """One parsed spreadsheet row."""

    id: str
    game_id: str
    song_no: int
    implementation_no: int | None = None
    name: str
    difficulties: dict[str, DifficultyInfo] = Field(default_factory=dict)
    info: SongInfo = Field(default_factory=SongInfo)
