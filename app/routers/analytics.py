"""Analytics dashboard data endpoint.

GET /api/candidates/analytics/overview -- totals, average experience,
recent activity, status distribution and the top roles.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.core.errors import UnexpectedServiceError
from app.models.responses import AnalyticsResponse
from app.services.analytics import get_overview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/overview", response_model=AnalyticsResponse)
def analytics_overview() -> AnalyticsResponse:
    """Return the dashboard summary over all candidates."""
    try:
        overview = get_overview()
    except Exception as exc:
        logger.error(
            "analytics_overview_failed",
            extra={"error_message": str(exc)},
            exc_info=True,
        )
        raise UnexpectedServiceError("Failed to fetch analytics", message=str(exc)) from exc

    return AnalyticsResponse(data=overview)
