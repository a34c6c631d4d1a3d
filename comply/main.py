"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from comply.api import auth, ppts, videos
from comply.api.limits import UploadSizeLimitMiddleware
from comply.config import get_settings
from comply.database import init_db
from comply.services.storage import MIB, get_upload_storage

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.is_production:
        # Production schema is managed by Alembic
        init_db()
    get_upload_storage().ensure_directories()
    logger.info(f"Comply API started ({settings.environment})")
    yield


app = FastAPI(
    title="Comply Media API",
    description="Role-gated storage and streaming of training videos and presentations",
    version="0.1.0",
    lifespan=lifespan,
)

# Body caps sit inside CORS so a 413 still carries the CORS headers
app.add_middleware(
    UploadSizeLimitMiddleware,
    limits={
        videos.router.prefix: settings.max_video_size_mb * MIB,
        ppts.router.prefix: settings.max_ppt_size_mb * MIB,
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router)
app.include_router(videos.router)
app.include_router(ppts.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
