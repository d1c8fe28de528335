"""SongSheet server script.

Usage:
    songsheet-server [--host HOST] [--port PORT] [--reload]

Host, port and reload default to the [server] config section
(``debug = true`` turns on reload).
"""

import argparse
import sys

import uvicorn

from songsheet.config import settings


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="SongSheet API server")
    parser.add_argument("--host", help=f"Host to bind to (default: {settings.host})")
    parser.add_argument("--port", "-p", type=int, help=f"Port to bind to (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    args = parser.parse_args()

    host = args.host or settings.host
    port = args.port or settings.port
    reload = args.reload or settings.debug

    print(f"Starting SongSheet on http://{host}:{port}")
    uvicorn.run(
        "songsheet.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
