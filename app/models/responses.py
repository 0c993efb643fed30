"""Success envelopes returned by the candidate endpoints.

Errors use the envelope built in ``app.core.errors``.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from app.models.analytics import AnalyticsOverview
from app.models.candidate import CandidatePublic


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Pagination:
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class CandidateListResponse(BaseModel):
    success: bool = True
    data: list[CandidatePublic] = []
    pagination: Pagination


class CandidateResponse(BaseModel):
    success: bool = True
    data: CandidatePublic


class CandidateMessageResponse(CandidateResponse):
    """Record plus the confirmation shown after a write."""
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class AnalyticsResponse(BaseModel):
    success: bool = True
    data: AnalyticsOverview
