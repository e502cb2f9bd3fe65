"""Application entry point."""

from __future__ import annotations

import uvicorn

from autoquote.api.app import configure_logging, create_app
from autoquote.core.config import load_config


def run() -> None:
    """Serve the quote API."""
    config = load_config()
    configure_logging(config.logging.level)
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
