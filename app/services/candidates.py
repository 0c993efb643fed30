"""Candidate store: schema-validated CRUD and queries over Supabase.

Every write is validated against ``CandidateCreate`` / ``CandidateUpdate``
before it reaches PostgREST, so rows in the table always satisfy the
candidate invariants.  Lookups by a malformed id are treated as misses.

Concurrent updates to the same row are last-write-wins; there is no
version column.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.constants import SORTABLE_COLUMNS
from app.core.errors import (
    CandidateNotFoundError,
    CandidateValidationError,
    InvalidQueryError,
    InvalidStatusError,
)
from app.db.supabase import candidates_table
from app.models.candidate import Candidate, CandidateCreate, CandidateQuery, CandidateUpdate
from app.models.enums import CandidateStatus, SortOrder

logger = logging.getLogger(__name__)

SEARCH_COLUMNS: tuple[str, ...] = ("name", "role", "email")

# Secondary sort keys so equal primary values page deterministically
_TIEBREAK_COLUMNS: tuple[str, ...] = ("created_at", "id")

# PostgREST error code for an offset beyond the exact row count
RANGE_NOT_SATISFIABLE = "PGRST103"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_id(candidate_id: str) -> str:
    """Canonical UUID string, or CandidateNotFoundError for anything else."""
    try:
        return str(UUID(str(candidate_id)))
    except ValueError:
        raise CandidateNotFoundError() from None


def _validate(model: type[BaseModel], payload: Mapping[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        error = CandidateValidationError.from_pydantic(exc)
        logger.info("candidate_validation_failed", extra={"messages": error.messages})
        raise error from exc


def _first_row(result: Any) -> dict[str, Any] | None:
    rows = result.data or []
    return rows[0] if rows else None


def sort_column(sort_by: str) -> str:
    """Map a JSON attribute (or column) name to its sortable column."""
    if sort_by in SORTABLE_COLUMNS:
        return SORTABLE_COLUMNS[sort_by]
    if sort_by in SORTABLE_COLUMNS.values():
        return sort_by
    raise InvalidQueryError(
        "Invalid sort field",
        message=f"Cannot sort by '{sort_by}'. Sortable fields: {', '.join(SORTABLE_COLUMNS)}",
    )


def search_filter(term: str) -> str:
    """PostgREST ``or`` filter matching ``term`` as a substring of any
    search column, case-insensitively.

    LIKE wildcards in ``term`` are escaped so they match literally, then the
    pattern is double-quoted so commas and parentheses survive PostgREST's
    filter grammar.
    """
    like = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = like.replace("\\", "\\\\").replace('"', '\\"')
    return ",".join(f'{column}.ilike."%{quoted}%"' for column in SEARCH_COLUMNS)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def insert_candidate(payload: Mapping[str, Any]) -> Candidate:
    """Validate ``payload`` and store it as a new candidate.

    ``status`` defaults to applied and ``appliedDate`` to the insert time.
    Raises CandidateValidationError naming every violated field.
    """
    data: CandidateCreate = _validate(CandidateCreate, payload)

    now = _now().isoformat()
    row = data.model_dump(mode="json")
    if row.get("applied_date") is None:
        row["applied_date"] = now
    row["created_at"] = now
    row["updated_at"] = now

    stored = _first_row(candidates_table().insert(row).execute())
    if stored is None:
        raise RuntimeError("Insert returned no row")

    candidate = Candidate.model_validate(stored)
    logger.info(
        "candidate_created",
        extra={"candidate_id": str(candidate.id), "status": candidate.status.value},
    )
    return candidate


def get_candidate(candidate_id: str) -> Candidate:
    cid = _parse_id(candidate_id)
    row = _first_row(candidates_table().select("*").eq("id", cid).limit(1).execute())
    if row is None:
        raise CandidateNotFoundError()
    return Candidate.model_validate(row)


def update_candidate(
    candidate_id: str,
    patch: Mapping[str, Any],
    *,
    validate: bool = True,
) -> Candidate:
    """Apply ``patch`` to a candidate and return the updated record.

    With ``validate`` the patch is checked against ``CandidateUpdate`` and
    only the attributes it names are written.  Without it the patch must
    already use column names and trusted values.
    """
    cid = _parse_id(candidate_id)

    if validate:
        data: CandidateUpdate = _validate(CandidateUpdate, patch)
        changes = data.model_dump(mode="json", exclude_unset=True)
    else:
        changes = dict(patch)
    changes["updated_at"] = _now().isoformat()

    row = _first_row(candidates_table().update(changes).eq("id", cid).execute())
    if row is None:
        raise CandidateNotFoundError()

    logger.info(
        "candidate_updated",
        extra={"candidate_id": cid, "fields": sorted(changes)},
    )
    return Candidate.model_validate(row)


def update_status(candidate_id: str, status: object) -> Candidate:
    """Move a candidate to another pipeline stage.

    The status is checked before the candidate is looked up, so an invalid
    value never touches the stored record.
    """
    parsed = CandidateStatus.parse(status)
    if parsed is None:
        raise InvalidStatusError()
    return update_candidate(candidate_id, {"status": parsed.value}, validate=False)


def delete_candidate(candidate_id: str) -> None:
    cid = _parse_id(candidate_id)
    result = candidates_table().delete().eq("id", cid).execute()
    if not result.data:
        raise CandidateNotFoundError()
    logger.info("candidate_deleted", extra={"candidate_id": cid})


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _filtered(builder: Any, query: CandidateQuery) -> Any:
    if query.status and query.status != "all":
        builder = builder.eq("status", query.status)
    search = (query.search or "").strip()
    if search:
        builder = builder.or_(search_filter(search))
    return builder


def query_candidates(query: CandidateQuery) -> tuple[list[Candidate], int]:
    """Return one pagination window of matching candidates and the total
    number of matches.

    A window that starts past the last match is an empty page, not an
    error.
    """
    column = sort_column(query.sort_by)
    descending = query.sort_order is SortOrder.desc

    builder = _filtered(candidates_table().select("*", count="exact"), query)
    builder = builder.order(column, desc=descending)
    for tiebreak in _TIEBREAK_COLUMNS:
        if tiebreak != column:
            builder = builder.order(tiebreak, desc=descending)

    try:
        result = builder.range(query.skip, query.skip + query.limit - 1).execute()
    except APIError as exc:
        if exc.code != RANGE_NOT_SATISFIABLE:
            raise
        counted = _filtered(candidates_table().select("id", count="exact"), query).limit(1).execute()
        logger.debug(
            "query_window_past_end",
            extra={"skip": query.skip, "total": counted.count},
        )
        return [], counted.count or 0

    rows = result.data or []
    total = result.count if result.count is not None else len(rows)
    return [Candidate.model_validate(row) for row in rows], total


def list_by_status(status: str, page: int = 1, limit: int = 50) -> tuple[list[Candidate], int]:
    """Candidates in one pipeline stage, newest application first."""
    parsed = CandidateStatus.parse(status)
    if parsed is None:
        raise InvalidStatusError()
    return query_candidates(
        CandidateQuery(
            status=parsed.value,
            sort_by="appliedDate",
            sort_order=SortOrder.desc,
            page=page,
            limit=limit,
        )
    )


def count_candidates(since: datetime | None = None) -> int:
    """Number of candidates, optionally only those applied at or after
    ``since``.
    """
    builder = candidates_table().select("id", count="exact")
    if since is not None:
        builder = builder.gte("applied_date", since.isoformat())
    result = builder.limit(1).execute()
    return result.count or 0


def fetch_rows(columns: str = "*") -> list[dict[str, Any]]:
    """Read every candidate row, in creation order, a batch at a time.

    PostgREST caps each response at its max-rows setting, so the table is
    walked with consecutive ranges until a short batch comes back.
    """
    batch_size = settings.STORE_BATCH_SIZE
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        result = (
            candidates_table()
            .select(columns)
            .order("created_at")
            .order("id")
            .range(start, start + batch_size - 1)
            .execute()
        )
        batch = result.data or []
        rows.extend(batch)
        if len(batch) < batch_size:
            break
        start += batch_size
    logger.debug("fetch_rows_completed", extra={"row_count": len(rows)})
    return rows
