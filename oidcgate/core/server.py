"""Process entry point: logging setup and the uvicorn server."""

import logging
import os

import uvicorn

from oidcgate.core.app import create_app

logger = logging.getLogger(__name__)

UVICORN_LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in UVICORN_LOG_LEVELS else "info"
    )

    app = create_app()
    logger.info("Starting oidcgate on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)


if __name__ == "__main__":
    run()
