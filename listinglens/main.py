import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listinglens.api.health import router as health_router
from listinglens.api.router import api_router
from listinglens.config import settings
from listinglens.core.logging_config import configure_logging
from listinglens.middleware.request_id import RequestIDMiddleware

# Must run before any module logger emits
configure_logging(log_format=settings.LOG_FORMAT, log_level=settings.LOG_LEVEL)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.SENTRY_ENVIRONMENT,
        release=f"listinglens@{settings.APP_VERSION}",
    )

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting %s v%s for %s",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.MARKETPLACE_DOMAIN,
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="ListingLens - resolve marketplace listing URLs into an item "
    "identifier, title, description and representative image.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request ID middleware (must be added before other middleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)

# Health & metrics routes (no /v1 prefix)
app.include_router(health_router)


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "status": "running",
    }
