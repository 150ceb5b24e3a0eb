"""Bill Delivery Tracker API — main application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from billtrack.core.config import settings
from billtrack.core.database import dispose_db, init_db
from billtrack.core.logging import get_logger, setup_logging
from billtrack.api.routes import config, deliveries, health, properties, uploads, wards

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    if settings.AUTO_CREATE_TABLES:
        await init_db()
        logger.info("Database tables created")
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    await dispose_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description=(
        "Property tax bill delivery tracking. "
        "Bulk register import, wards, properties and delivery records."
    ),
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router, tags=["health"])
app.include_router(config.router, prefix="/api/v1/config", tags=["config"])
app.include_router(wards.router, prefix="/api/v1/wards", tags=["wards"])
# Upload routes first so /upload/... is never read as a property id
app.include_router(uploads.router, prefix="/api/v1/properties", tags=["uploads"])
app.include_router(properties.router, prefix="/api/v1/properties", tags=["properties"])
app.include_router(deliveries.router, prefix="/api/v1/deliveries", tags=["deliveries"])
