"""API routers for SongSheet."""

from songsheet.routers import games, import_router

__all__ = ["games", "import_router"]
