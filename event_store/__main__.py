"""Run the event store with uvicorn: ``python -m event_store``."""

import logging
import os

import uvicorn

from event_store.main import app

logger = logging.getLogger("event_store")


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    logger.info("Server started on port %s", port)
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "INFO").lower())


if __name__ == "__main__":
    main()
