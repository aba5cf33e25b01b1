"""Entry point running the MathBlitz leaderboard server."""

from __future__ import annotations

from blitz_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from blitz_app.core.services.leaderboard import Leaderboard
from blitz_app.server.api_server import start_api_server
from blitz_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging and serve the leaderboard until interrupted."""
    logger = configure_logging()
    logger.info("Starting MathBlitz leaderboard on %s:%d", DEFAULT_HOST, DEFAULT_PORT)

    server_thread = start_api_server(
        leaderboard=Leaderboard(), host=DEFAULT_HOST, port=DEFAULT_PORT
    )
    try:
        server_thread.join()
    except KeyboardInterrupt:
        logger.info("Leaderboard server stopped.")


if __name__ == "__main__":
    main()
