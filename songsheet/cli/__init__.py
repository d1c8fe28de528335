"""Command line tools for SongSheet."""
