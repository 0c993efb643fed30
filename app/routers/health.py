"""Liveness probe that also checks the candidates table is reachable."""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.db.supabase import candidates_table

logger = logging.getLogger(__name__)

router = APIRouter()


def _store_reachable() -> bool:
    try:
        candidates_table().select("id").limit(1).execute()
    except Exception:
        logger.warning("Health check: candidates table unreachable", exc_info=True)
        return False
    return True


@router.get("/health")
def health_check() -> Any:
    """200 with ``database: connected`` when a one-row select succeeds, else 503."""
    if _store_reachable():
        return {"status": "ok", "database": "connected"}
    return JSONResponse(
        status_code=503,
        content={"status": "degraded", "database": "disconnected"},
    )
