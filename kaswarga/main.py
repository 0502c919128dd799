"""Main application entry point."""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from kaswarga.config.settings import get_settings
from kaswarga.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Kas Warga treasury dashboard API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    # Load environment variables before settings are first read
    load_dotenv()
    settings = get_settings()

    setup_server_logging(settings.log_file, settings.log_level)
    logger.info(f"Starting Uvicorn server on {args.host}:{args.port}...")

    uvicorn.run(
        "kaswarga.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
