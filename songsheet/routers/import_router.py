"""Import endpoints for song spreadsheets."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from songsheet.config import settings
from songsheet.models.game import GameSchema
from songsheet.models.structure import SpreadsheetStructure
from songsheet.schemas.import_schemas import (
    AnalyzeResponse,
    MappingUpdateRequest,
    ParseResponse,
)
from songsheet.services.games import get_game
from songsheet.services.import_service import (
    analyze_spreadsheet,
    parse_spreadsheet,
    update_column_mapping,
)
from songsheet.services.import_service.processor import get_file_extension
from songsheet.services.structure_store import StructureStore
from songsheet.services.validator import validate_songs

logger = logging.getLogger(__name__)

router = APIRouter()


def get_structure_store() -> StructureStore:
    return StructureStore()


Store = Annotated[StructureStore, Depends(get_structure_store)]


def _require_game(game_id: str) -> GameSchema:
    game = get_game(game_id)
    if game is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Game '{game_id}' not found",
        )
    return game


async def _read_upload(file: UploadFile) -> bytes:
    """Validate the extension and read the upload with a size limit."""
    try:
        get_file_extension(file.filename)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    max_size = settings.max_upload_size_bytes
    # Read in chunks to avoid unbounded memory for oversized files
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(64 * 1024)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds maximum size of {settings.max_upload_size_mb} MB",
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def _get_stored_structure(store: StructureStore, game_id: str) -> SpreadsheetStructure | None:
    try:
        return await store.get(game_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_upload(
    store: Store,
    file: UploadFile = File(..., description="CSV or XLSX spreadsheet"),
    game_id: str = Form(...),
    sheet_name: str | None = Form(None),
    reanalyze: bool = Form(False),
) -> AnalyzeResponse:
    """Analyze a spreadsheet's structure.

    Returns the structure stored for the game unless ``reanalyze`` is set or
    none is stored, in which case a fresh structure is inferred and saved.
    """
    game = _require_game(game_id)
    content = await _read_upload(file)

    stored = None if reanalyze else await _get_stored_structure(store, game_id)
    try:
        result = analyze_spreadsheet(
            content,
            file.filename or "",
            game,
            sheet_name=sheet_name,
        )
        structure = stored or result.structure
        if stored is None:
            await store.save(structure)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AnalyzeResponse(
        filename=file.filename or "unknown",
        structure=structure,
        headers=result.headers,
        preview_rows=result.preview_rows,
        sheet_names=result.sheet_names,
        from_store=stored is not None,
    )


@router.get("/structures/{game_id}", response_model=SpreadsheetStructure)
async def get_structure(game_id: str, store: Store) -> SpreadsheetStructure:
    """Get the stored structure of a game."""
    structure = await _get_stored_structure(store, game_id)
    if structure is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No structure stored for '{game_id}'",
        )
    return structure


@router.put("/structures/{game_id}", response_model=SpreadsheetStructure)
async def put_structure(
    game_id: str,
    structure: SpreadsheetStructure,
    store: Store,
) -> SpreadsheetStructure:
    """Replace the stored structure of a game."""
    game = _require_game(game_id)
    if structure.game_id != game_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Structure game_id does not match the URL",
        )
    unknown = [
        difficulty_id
        for difficulty_id in structure.column_mapping.difficulties
        if game.get_difficulty(difficulty_id) is None
    ]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown difficulties for {game_id}: {', '.join(unknown)}",
        )
    try:
        await store.save(structure)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return structure


@router.patch("/structures/{game_id}/mapping", response_model=SpreadsheetStructure)
async def patch_mapping(
    game_id: str,
    request: MappingUpdateRequest,
    store: Store,
) -> SpreadsheetStructure:
    """Point one field of the stored mapping at a different column."""
    structure = await get_structure(game_id, store)
    try:
        updated = update_column_mapping(
            structure, request.field, request.sub_field, request.column_index
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await store.save(updated)
    return updated


@router.delete("/structures/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_structure(game_id: str, store: Store) -> None:
    """Delete the stored structure of a game (the next upload re-infers it)."""
    try:
        deleted = await store.delete(game_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No structure stored for '{game_id}'",
        )


@router.post("/parse", response_model=ParseResponse)
async def parse_upload(
    store: Store,
    file: UploadFile = File(..., description="CSV or XLSX spreadsheet"),
    game_id: str = Form(...),
    strict_titles: bool = Form(False),
    reanalyze: bool = Form(False),
) -> ParseResponse:
    """Parse songs from a spreadsheet.

    Uses the game's stored structure, inferring and saving one first when
    none is stored or ``reanalyze`` is set.
    """
    game = _require_game(game_id)
    content = await _read_upload(file)
    filename = file.filename or ""

    structure = None if reanalyze else await _get_stored_structure(store, game_id)
    try:
        if structure is None:
            structure = analyze_spreadsheet(content, filename, game).structure
            await store.save(structure)
        songs = parse_spreadsheet(
            content, filename, structure, game, strict_titles=strict_titles
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    issues = validate_songs(songs, game)
    logger.info("Parsed %d songs for %s from %s", len(songs), game_id, filename)

    return ParseResponse(
        filename=filename or "unknown",
        game_id=game_id,
        song_count=len(songs),
        songs=songs,
        issues=issues,
        structure=structure,
    )
