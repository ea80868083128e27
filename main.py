"""
Salon booking entry point.

Serves the HTTP API with uvicorn, or runs the offline console.

Usage:
    HTTP API:     python main.py serve
    Console mode: python main.py console [--scenario scheduled|immediate]
"""

import logging
import sys

from salon_booking.config import settings

logger = logging.getLogger(__name__)


def _run_server() -> None:
    """Start the FastAPI app (chat replies need OPENAI_API_KEY)."""
    import uvicorn

    logger.info(
        "Serving %s on %s:%d", settings.salon.name, settings.server.host, settings.server.port
    )
    uvicorn.run(
        "salon_booking.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


def _run_console_mode() -> None:
    """Start the offline console demo."""
    import console_demo

    sys.argv = [sys.argv[0], *sys.argv[2:]]
    console_demo.main()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_server()
