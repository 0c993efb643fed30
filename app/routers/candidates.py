"""Candidate CRUD endpoints.

GET    /api/candidates                 -- filtered, searched, sorted page
GET    /api/candidates/status/{status} -- one pipeline stage, newest first
GET    /api/candidates/{id}
POST   /api/candidates
PUT    /api/candidates/{id}
PATCH  /api/candidates/{id}/status
DELETE /api/candidates/{id}

Handlers are plain ``def`` so FastAPI runs the blocking Supabase calls on
its threadpool.  Domain errors propagate to the handlers registered in
``app.core.errors``; anything else is logged and reported as a 500.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import APIRouter, Body, Query

from app.core.config import settings
from app.core.errors import CandidateServiceError, UnexpectedServiceError
from app.models.candidate import CandidatePublic, CandidateQuery
from app.models.enums import SortOrder
from app.models.responses import (
    CandidateListResponse,
    CandidateMessageResponse,
    CandidateResponse,
    MessageResponse,
    Pagination,
)
from app.services.candidates import (
    delete_candidate,
    get_candidate,
    insert_candidate,
    list_by_status,
    query_candidates,
    update_candidate,
    update_status,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def _store_errors(event: str, error: str, **context: Any) -> Iterator[None]:
    """Re-raise unexpected store failures as UnexpectedServiceError."""
    try:
        yield
    except CandidateServiceError:
        raise
    except Exception as exc:
        logger.error(
            event,
            extra={**context, "error_message": str(exc)},
            exc_info=True,
        )
        raise UnexpectedServiceError(error, message=str(exc)) from exc


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@router.get("", response_model=CandidateListResponse)
def list_candidates(
    status: str | None = Query(
        default=None,
        description="Exact status to filter by; 'all' or omitted for every status",
    ),
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring of name, role or email",
    ),
    sort_by: str = Query(default="appliedDate", alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.desc, alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> CandidateListResponse:
    """Return one page of candidates with pagination metadata."""
    query = CandidateQuery(
        status=status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    with _store_errors("list_candidates_failed", "Failed to fetch candidates"):
        records, total = query_candidates(query)

    return CandidateListResponse(
        data=[CandidatePublic.from_record(r) for r in records],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/status/{status}", response_model=CandidateListResponse)
def list_candidates_by_status(
    status: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> CandidateListResponse:
    """Return candidates in one status, most recent application first."""
    with _store_errors(
        "list_candidates_by_status_failed",
        "Failed to fetch candidates by status",
        status=status,
    ):
        records, total = list_by_status(status, page=page, limit=limit)

    return CandidateListResponse(
        data=[CandidatePublic.from_record(r) for r in records],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
def read_candidate(candidate_id: str) -> CandidateResponse:
    with _store_errors("get_candidate_failed", "Failed to fetch candidate", candidate_id=candidate_id):
        record = get_candidate(candidate_id)
    return CandidateResponse(data=CandidatePublic.from_record(record))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

@router.post("", status_code=201, response_model=CandidateMessageResponse)
def create_candidate(payload: dict[str, Any] = Body(...)) -> CandidateMessageResponse:
    with _store_errors("create_candidate_failed", "Failed to create candidate"):
        record = insert_candidate(payload)
    return CandidateMessageResponse(
        data=CandidatePublic.from_record(record),
        message="Candidate created successfully",
    )


@router.put("/{candidate_id}", response_model=CandidateMessageResponse)
def replace_candidate(candidate_id: str, payload: dict[str, Any] = Body(...)) -> CandidateMessageResponse:
    """Update any subset of a candidate's attributes, re-validating them."""
    with _store_errors("update_candidate_failed", "Failed to update candidate", candidate_id=candidate_id):
        record = update_candidate(candidate_id, payload)
    return CandidateMessageResponse(
        data=CandidatePublic.from_record(record),
        message="Candidate updated successfully",
    )


@router.patch("/{candidate_id}/status", response_model=CandidateMessageResponse)
def change_candidate_status(
    candidate_id: str,
    payload: dict[str, Any] = Body(...),
) -> CandidateMessageResponse:
    """Move a candidate to another status (kanban drag and drop)."""
    with _store_errors(
        "update_candidate_status_failed",
        "Failed to update candidate status",
        candidate_id=candidate_id,
    ):
        record = update_status(candidate_id, payload.get("status"))
    return CandidateMessageResponse(
        data=CandidatePublic.from_record(record),
        message=f"Candidate status updated to {record.status.value}",
    )


@router.delete("/{candidate_id}", response_model=MessageResponse)
def remove_candidate(candidate_id: str) -> MessageResponse:
    with _store_errors("delete_candidate_failed", "Failed to delete candidate", candidate_id=candidate_id):
        delete_candidate(candidate_id)
    return MessageResponse(message="Candidate deleted successfully")
