"""FastAPI application entry point.

Wires logging, the ``{success, error}`` error envelope, CORS and the
health, analytics and candidate routers.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.routers import analytics, candidates, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    logger.info("Applicant tracking API starting (table=%s)", settings.CANDIDATES_TABLE)
    yield
    logger.info("Applicant tracking API stopped")


app = FastAPI(
    title="Applicant Tracking API",
    description="Candidate pipeline management: CRUD, status moves, listing and analytics",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
# analytics is mounted first so /analytics/overview is not read as an id
app.include_router(health.router, tags=["Health"])
app.include_router(analytics.router, prefix="/api/candidates/analytics", tags=["Analytics"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["Candidates"])
