"""Tests for structure persistence."""

import pytest

from songsheet.models.structure import ColumnMapping, SpreadsheetStructure
from songsheet.services.structure_store import InvalidGameIdError, StructureStore


def _structure(game_id: str = "bandori") -> SpreadsheetStructure:
    return SpreadsheetStructure(
        game_id=game_id,
        sheet_name="Songs",
        header_row=1,
        data_start_row=2,
        column_mapping=ColumnMapping(song_no=0, name=1, difficulties={"EASY": 2}),
    )


@pytest.mark.asyncio
async def test_save_and_get(store: StructureStore) -> None:
    structure = _structure()
    await store.save(structure)

    loaded = await store.get("bandori")
    assert loaded == structure
    assert (store.storage_path / "bandori.json").exists()


@pytest.mark.asyncio
async def test_save_replaces(store: StructureStore) -> None:
    await store.save(_structure())
    replacement = _structure()
    replacement.header_row = 4
    await store.save(replacement)

    loaded = await store.get("bandori")
    assert loaded.header_row == 4


@pytest.mark.asyncio
async def test_get_missing(store: StructureStore) -> None:
    assert await store.get("nothing") is None


@pytest.mark.asyncio
async def test_get_unreadable(store: StructureStore) -> None:
    """Test a corrupt file reads as no stored structure."""
    (store.storage_path / "broken.json").write_text("{not json", encoding="utf-8")
    assert await store.get("broken") is None


@pytest.mark.asyncio
async def test_delete(store: StructureStore) -> None:
    await store.save(_structure())
    assert await store.delete("bandori") is True
    assert await store.get("bandori") is None
    assert await store.delete("bandori") is False


@pytest.mark.asyncio
async def test_invalid_game_id(store: StructureStore) -> None:
    with pytest.raises(InvalidGameIdError):
        await store.get("../etc/passwd")
    with pytest.raises(InvalidGameIdError):
        await store.save(_structure("a b"))


@pytest.mark.asyncio
async def test_list_game_ids(store: StructureStore) -> None:
    await store.save(_structure("pjsekai"))
    await store.save(_structure("bandori"))
    assert store.list_game_ids() == ["bandori", "pjsekai"]


def test_default_path_from_settings(tmp_path) -> None:
    store = StructureStore()
    assert store.storage_path == tmp_path / "data" / "structures"
    assert store.storage_path.is_dir()
