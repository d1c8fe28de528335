"""SongSheet - rhythm game song catalog importer."""

__version__ = "0.1.0"
