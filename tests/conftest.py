"""Pytest configuration and fixtures for SongSheet tests."""

import io
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

from songsheet.config import reset_settings
from songsheet.models.game import GameSchema
from songsheet.services.games import build_game_schema
from songsheet.services.structure_store import StructureStore


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test against a fresh data directory and no config file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SONGSHEET_STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(
        "songsheet.config.loader.get_config_search_paths",
        lambda: [tmp_path / "config.toml"],
    )
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def game() -> GameSchema:
    """A four-difficulty game."""
    return build_game_schema(
        "testgame",
        "Test Game",
        [
            {"id": "EASY", "min_level": 1, "max_level": 10},
            {"id": "NORMAL", "min_level": 5, "max_level": 15},
            {"id": "HARD", "min_level": 10, "max_level": 20},
            {"id": "EXPERT", "min_level": 15, "max_level": 30},
        ],
    )


@pytest.fixture
def store(tmp_path: Path) -> StructureStore:
    return StructureStore(tmp_path / "structures")


def _make_xlsx(rows: list[list[Any]], sheets: dict[str, list[list[Any]]] | None = None) -> bytes:
    """Create XLSX bytes; ``rows`` fill the first sheet, ``sheets`` add more."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Songs"
    for row in rows:
        ws.append(row)
    for title, sheet_rows in (sheets or {}).items():
        extra = wb.create_sheet(title)
        for row in sheet_rows:
            extra.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _make_csv(rows: list[list[Any]], encoding: str = "utf-8") -> bytes:
    lines = [",".join("" if cell is None else str(cell) for cell in row) for row in rows]
    return ("\n".join(lines) + "\n").encode(encoding)


@pytest.fixture
def make_xlsx():
    return _make_xlsx


@pytest.fixture
def make_csv():
    return _make_csv


@pytest_asyncio.fixture
async def client(store: StructureStore) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with the structure store pointed at a temp directory."""
    from songsheet.main import app
    from songsheet.routers.import_router import get_structure_store

    app.dependency_overrides[get_structure_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
