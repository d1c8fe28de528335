"""Spreadsheet import script for SongSheet.

Commands:
    games     List known games
    analyze   Infer the column structure of a spreadsheet
    parse     Extract songs from a spreadsheet as JSON
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from songsheet.config import settings
from songsheet.models.structure import SpreadsheetStructure
from songsheet.services.games import get_game, list_games
from songsheet.services.import_service import analyze_spreadsheet, parse_spreadsheet
from songsheet.services.structure_store import StructureStore
from songsheet.services.validator import validate_songs

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from the [logging] config section."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(level=level, format=settings.log_format)


def show_games() -> int:
    """List all known games."""
    games = list_games()
    if not games:
        print("No games found.")
        return 0

    print(f"{'ID':<12} {'Title':<40} {'Difficulties'}")
    print("-" * 90)
    for game in games:
        difficulties = ", ".join(d.name for d in game.ordered_difficulties())
        print(f"{game.id:<12} {game.title:<40} {difficulties}")
    return 0


def analyze_file(path: Path, game_id: str, sheet_name: str | None = None, save: bool = False) -> int:
    """Infer and print the structure of a spreadsheet."""
    game = get_game(game_id)
    if game is None:
        print(f"Error: Game '{game_id}' not found.")
        return 1

    try:
        result = analyze_spreadsheet(path.read_bytes(), path.name, game, sheet_name=sheet_name)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    mapping = result.structure.column_mapping
    print(f"Sheet: {result.structure.sheet_name}")
    print(f"Header row: {result.structure.header_row}, data starts at row {result.structure.data_start_row}")
    print()
    print(f"{'Field':<32} {'Column':<8} {'Header'}")
    print("-" * 70)
    for field, sub_field, index in mapping.iter_fields():
        label = f"{field}.{sub_field}" if sub_field else field
        header = result.headers[index] if 0 <= index < len(result.headers) else ""
        column = str(index) if index >= 0 else "-"
        print(f"{label:<32} {column:<8} {header}")

    if save:
        asyncio.run(StructureStore().save(result.structure))
        print(f"\nStructure for '{game_id}' saved.")
    return 0


def _load_structure(structure_path: Path | None, game_id: str) -> SpreadsheetStructure | None:
    if structure_path is not None:
        return SpreadsheetStructure.model_validate_json(structure_path.read_text(encoding="utf-8"))
    return asyncio.run(StructureStore().get(game_id))


def parse_file(
    path: Path,
    game_id: str,
    structure_path: Path | None = None,
    output: Path | None = None,
    strict_titles: bool = False,
) -> int:
    """Extract songs from a spreadsheet and write them as JSON."""
    game = get_game(game_id)
    if game is None:
        print(f"Error: Game '{game_id}' not found.")
        return 1

    try:
        content = path.read_bytes()
        structure = _load_structure(structure_path, game_id)
        if structure is None:
            logger.info("No stored structure for %s, inferring one", game_id)
            structure = analyze_spreadsheet(content, path.name, game).structure
        songs = parse_spreadsheet(content, path.name, structure, game, strict_titles=strict_titles)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error: {e}")
        return 1

    issues = validate_songs(songs, game)
    payload = json.dumps(
        [song.model_dump(mode="json") for song in songs],
        ensure_ascii=False,
        indent=2,
    )
    if output is not None:
        output.write_text(payload + "\n", encoding="utf-8")
        print(f"Wrote {len(songs)} songs to {output}")
    else:
        print(payload)

    errors = [issue for issue in issues if issue.severity == "error"]
    for issue in issues:
        logger.warning("%s [%s] %s: %s", issue.song_id, issue.severity, issue.field_path, issue.description)
    if issues:
        print(f"{len(issues)} validation issues ({len(errors)} errors)", file=sys.stderr)
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Spreadsheet import for SongSheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("games", help="List known games")

    analyze_parser = subparsers.add_parser("analyze", help="Infer a spreadsheet's structure")
    analyze_parser.add_argument("file", type=Path, help="CSV or XLSX file")
    analyze_parser.add_argument("--game", "-g", required=True, help="Game ID")
    analyze_parser.add_argument("--sheet", "-s", help="Worksheet name (XLSX only)")
    analyze_parser.add_argument("--save", action="store_true", help="Store the structure for the game")

    parse_parser = subparsers.add_parser("parse", help="Extract songs as JSON")
    parse_parser.add_argument("file", type=Path, help="CSV or XLSX file")
    parse_parser.add_argument("--game", "-g", required=True, help="Game ID")
    parse_parser.add_argument("--structure", type=Path, help="Structure JSON file (default: stored structure)")
    parse_parser.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")
    parse_parser.add_argument(
        "--strict-titles", action="store_true", help="Fail on rows without a title"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    if args.command == "games":
        return show_games()
    if args.command == "analyze":
        return analyze_file(args.file, args.game, args.sheet, args.save)
    if args.command == "parse":
        return parse_file(args.file, args.game, args.structure, args.output, args.strict_titles)
    return 1


if __name__ == "__main__":
    sys.exit(main())
