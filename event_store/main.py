import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv  # load .env variables

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sqlalchemy.exc import DBAPIError, OperationalError

from event_store.database import Database, mask_database_url
from event_store.errors import register_exception_handlers
from event_store.routes.events import router as events_router

# ----- Load environment variables -----
load_dotenv()

# ----- Logging -----
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


async def connect_with_retry(database: Database) -> None:
    """Ensure database connectivity with simple retry logic; re-raise once attempts run out."""

    max_attempts = int(os.getenv("DB_INIT_MAX_ATTEMPTS", "10"))
    base_delay = float(os.getenv("DB_INIT_RETRY_SECONDS", "1.0"))

    attempt = 0
    while True:
        attempt += 1
        try:
            await database.connect()
        except (OperationalError, DBAPIError, OSError) as exc:
            if attempt >= max_attempts:
                logger.exception("Database not reachable after %s attempts", attempt)
                raise

            wait_time = base_delay * min(2 ** (attempt - 1), 8)
            logger.warning(
                "Database not ready (attempt %s/%s): %s. Retrying in %.1f seconds...",
                attempt,
                max_attempts,
                exc,
                wait_time,
            )
            await asyncio.sleep(wait_time)
        else:
            return


def create_app(database: Optional[Database] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database.from_env()
        logger.info("Using DB: %s", mask_database_url(db.url))
        try:
            await connect_with_retry(db)
        except Exception:
            await db.dispose()
            raise
        app.state.database = db
        logger.info("Event store started and events table ensured.")
        try:
            yield
        finally:
            await db.dispose()
            logger.info("Database connections closed.")

    app = FastAPI(
        title="Event Store",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ----- CORS (enabled only if ALLOWED_ORIGINS is set) -----
    raw_origins = os.getenv("ALLOWED_ORIGINS", "").strip()
    if raw_origins:
        allowed_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Accept", "Origin"],
            max_age=86400,
        )

    register_exception_handlers(app)
    app.include_router(events_router)
    return app


app = create_app()
