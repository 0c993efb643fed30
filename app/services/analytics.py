"""Analytics aggregation service for the dashboard.

Group-by summaries (per status, per role) are reduced in Python from the
candidate rows; the recent-activity window is a count query.  Averages are
rounded half-up to one decimal.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.core.config import settings
from app.core.constants import EXPERIENCE_BUCKETS
from app.models.analytics import AnalyticsOverview, ExperienceBucket, RoleBucket, StatusBucket
from app.models.enums import CandidateStatus
from app.services.candidates import count_candidates, fetch_rows

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def round_one_decimal(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def mean_experience(values: list[int]) -> float:
    """Rounded arithmetic mean, 0 for no values."""
    if not values:
        return 0.0
    return round_one_decimal(sum(values) / len(values))


def experience_histogram(values: list[int]) -> list[ExperienceBucket]:
    buckets: list[ExperienceBucket] = []
    for label, low, high in EXPERIENCE_BUCKETS:
        count = sum(1 for v in values if v >= low and (high is None or v <= high))
        buckets.append(ExperienceBucket(range=label, count=count))
    return buckets


# ---------------------------------------------------------------------------
# Group-by reductions
# ---------------------------------------------------------------------------

def aggregate_by_status(rows: list[Row] | None = None) -> list[StatusBucket]:
    """Count and average experience for each status that has candidates.

    Buckets come out in pipeline order (applied, interview, offer, rejected).
    """
    if rows is None:
        rows = fetch_rows("status, experience")

    grouped: dict[str, list[int]] = defaultdict(list)
    for row in rows:
        grouped[row["status"]].append(int(row["experience"]))

    return [
        StatusBucket(
            status=status,
            count=len(grouped[status.value]),
            avg_experience=mean_experience(grouped[status.value]),
        )
        for status in CandidateStatus
        if status.value in grouped
    ]


def aggregate_by_role(limit: int | None = None, rows: list[Row] | None = None) -> list[RoleBucket]:
    """Top ``limit`` roles by candidate count, largest first.

    Roles with equal counts keep the order in which their first candidate
    was created.
    """
    if limit is None:
        limit = settings.TOP_ROLES_LIMIT
    if rows is None:
        rows = fetch_rows("role, experience")

    by_role: dict[str, list[int]] = {}
    for row in rows:
        by_role.setdefault(row["role"], []).append(int(row["experience"]))

    # sorted() is stable, including with reverse=True
    ranked = sorted(by_role.items(), key=lambda item: len(item[1]), reverse=True)

    return [
        RoleBucket(
            role=role,
            count=len(values),
            avg_experience=mean_experience(values),
            experience_distribution=experience_histogram(values),
        )
        for role, values in ranked[:limit]
    ]


def count_since(since: datetime) -> int:
    """Candidates whose applied date is at or after ``since``."""
    return count_candidates(since=since)


# ---------------------------------------------------------------------------
# GET /api/candidates/analytics/overview
# ---------------------------------------------------------------------------

def get_overview(now: datetime | None = None) -> AnalyticsOverview:
    """Dashboard summary over the whole candidate table."""
    rows = fetch_rows("status, role, experience")
    experiences = [int(row["experience"]) for row in rows]

    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=settings.RECENT_ACTIVITY_DAYS)

    overview = AnalyticsOverview(
        total_candidates=len(rows),
        avg_experience=mean_experience(experiences),
        recent_activity=count_since(since),
        status_distribution=aggregate_by_status(rows),
        role_distribution=aggregate_by_role(settings.TOP_ROLES_LIMIT, rows),
    )

    logger.info(
        "analytics_overview_computed",
        extra={
            "total_candidates": overview.total_candidates,
            "recent_activity": overview.recent_activity,
        },
    )
    return overview
