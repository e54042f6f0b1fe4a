"""
Main entry point for the league API.
"""
from contextlib import asynccontextmanager
import os

from fastapi import FastAPI

from app.routes import auth, matches, players, rankings, seasons, users
from app.services.rankings_cache import RankingsCache
from app.services.rankings_service import RankingTTLs
from app.utils.db_async import init_db, dispose_engine, describe_database_url, DATABASE_URL

from app.logging_config import setup_logging
from app.config import settings

import logging
logger = logging.getLogger(__name__)

setup_logging(level=settings.log_level, access_log=settings.access_log, sql_echo=settings.sql_echo)


async def _maybe_init_db() -> None:
    if not (settings.is_dev and settings.auto_init_db) or os.getenv("FLY_APP_NAME"):
        logger.info("Skipping init_db(); auto_init_db disabled or managed deployment detected")
        return

    logger.info(f"Creating league tables on {describe_database_url(DATABASE_URL)}")
    try:
        await init_db()
    except Exception:
        logger.exception("init_db failed")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    await _maybe_init_db()
    ttls = RankingTTLs.from_settings()
    logger.info(
        f"Rankings cache TTLs (s): lifetime={ttls.lifetime} "
        f"season={ttls.season} date={ttls.specific_date}"
    )

    yield

    app.state.rankings_cache.clear()
    try:
        await dispose_engine()
        logger.info("DB engine disposed.")
    except Exception:
        logger.exception("Failed to dispose DB engine")


app = FastAPI(title="Pickleball League", lifespan=lifespan)
# Shared by every rankings request for the life of the process
app.state.rankings_cache = RankingsCache()

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(players.router)
app.include_router(seasons.router)
app.include_router(matches.router)
app.include_router(rankings.router)


@app.get("/health")
async def health_check():
    """Health Check Endpoint"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
