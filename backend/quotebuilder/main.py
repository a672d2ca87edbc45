"""
Main module of the Quote Builder FastAPI application.

Configures logging, CORS, the lifespan (tables and the exchange-rate refresh
task) and includes the routers.
"""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotebuilder.config import settings
from quotebuilder.currency.cache import run_refresh_loop
from quotebuilder.currency.config import currency_settings
from quotebuilder.currency.dependencies import get_conversion_cache
from quotebuilder.currency.router import router as currency_router
from quotebuilder.database import create_tables
from quotebuilder.health.router import router as health_router
from quotebuilder.quotations.router import router as quotations_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()

    refresh_task = None
    if currency_settings.REFRESH_ENABLED:
        refresh_task = asyncio.create_task(
            run_refresh_loop(get_conversion_cache(), hour=currency_settings.REFRESH_HOUR_UTC)
        )
        logger.info(f"[Lifespan] Exchange-rate refresh scheduled daily at {currency_settings.REFRESH_HOUR_UTC}:00 UTC")
    yield

    if refresh_task is not None:
        refresh_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresh_task
        logger.info("[Lifespan] Exchange-rate refresh stopped.")


app = FastAPI(
    title=settings.APP_TITLE,
    description="API for building sales quotations with tiered pricing, previews and PDF export.",
    version=settings.API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range", "Content-Disposition"],
)

# ======================================================
# Routers
# ======================================================
# /convrate must be matched before /quotations/{quotation_id}
app.include_router(currency_router, prefix=settings.API_V1_PREFIX)
app.include_router(quotations_router, prefix=settings.API_V1_PREFIX)
app.include_router(health_router)


@app.get("/", tags=["Root"])
async def read_root():
    return {
        "message": f"Welcome to the {settings.APP_TITLE}",
        "date": datetime.now(timezone.utc),
        "supportEmail": settings.SUPPORT_EMAIL,
        "API Version": settings.API_VERSION,
    }
