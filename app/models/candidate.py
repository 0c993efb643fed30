"""Pydantic models for the ``candidates`` table.

``CandidateCreate`` and ``CandidateUpdate`` are the input schemas the store
validates request bodies against.  ``Candidate`` is the canonical stored
record; ``CandidatePublic`` adds the derived display fields that are only
ever computed for responses.

JSON uses camelCase (``resumeLink``); columns are snake_case
(``resume_link``).  Both spellings are accepted on input.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.core.constants import (
    EMAIL_PATTERN,
    EXPERIENCE_MAX_YEARS,
    EXPERIENCE_MIN_YEARS,
    FIELD_LABELS,
    LOCATION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    RESUME_LINK_PATTERN,
    ROLE_MAX_LENGTH,
    SKILL_MAX_LENGTH,
    SOURCE_MAX_LENGTH,
    STATUS_LABELS,
)
from app.models.enums import CandidateStatus, SortOrder

_RESUME_LINK_RE = re.compile(RESUME_LINK_PATTERN)
_EMAIL_RE = re.compile(EMAIL_PATTERN)

Skill = Annotated[str, StringConstraints(strip_whitespace=True, max_length=SKILL_MAX_LENGTH)]


class _CandidateInput(BaseModel):
    """Optional attributes and normalisation shared by create and update."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)
    email: str | None = None
    phone: str | None = Field(default=None, max_length=PHONE_MAX_LENGTH)
    location: str | None = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    salary: float | None = Field(default=None, ge=0)
    source: str | None = Field(default=None, max_length=SOURCE_MAX_LENGTH)

    @field_validator("notes", "email", "phone", "location", "salary", "source", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.lower()
        if not _EMAIL_RE.match(value):
            raise ValueError("Please provide a valid email address")
        return value

    @field_validator("skills", mode="before", check_fields=False)
    @classmethod
    def _drop_blank_skills(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [s for s in value if not (isinstance(s, str) and not s.strip())]
        return value

    @field_validator("resume_link", check_fields=False)
    @classmethod
    def _check_resume_link(cls, value: str | None) -> str | None:
        if value is not None and not _RESUME_LINK_RE.match(value):
            raise ValueError("Resume link must be a valid URL")
        return value

    @field_validator("applied_date", check_fields=False)
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CandidateCreate(_CandidateInput):
    """Payload for creating a candidate (insert)."""

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    role: str = Field(min_length=1, max_length=ROLE_MAX_LENGTH)
    experience: int = Field(ge=EXPERIENCE_MIN_YEARS, le=EXPERIENCE_MAX_YEARS)
    resume_link: str = Field(min_length=1)
    status: CandidateStatus = CandidateStatus.applied
    applied_date: datetime | None = None  # defaulted by the store
    skills: list[Skill] = Field(default_factory=list)

    @field_validator("applied_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CandidateUpdate(_CandidateInput):
    """Partial payload for a full update; only supplied fields change.

    Required attributes may be omitted but not cleared.
    """

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    role: str | None = Field(default=None, min_length=1, max_length=ROLE_MAX_LENGTH)
    experience: int | None = Field(default=None, ge=EXPERIENCE_MIN_YEARS, le=EXPERIENCE_MAX_YEARS)
    resume_link: str | None = None
    status: CandidateStatus | None = None
    applied_date: datetime | None = None
    skills: list[Skill] | None = None

    @field_validator(
        "name", "role", "experience", "resume_link", "status", "applied_date",
        mode="before",
    )
    @classmethod
    def _not_cleared(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            label = FIELD_LABELS.get(to_camel(info.field_name or ""), info.field_name)
            raise ValueError(f"{label} is required")
        return value


class Candidate(BaseModel):
    """Full candidate record returned from the database."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: UUID
    name: str
    role: str
    experience: int
    resume_link: str
    status: CandidateStatus = CandidateStatus.applied
    applied_date: datetime
    notes: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    skills: list[str] = []
    salary: float | None = None
    source: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def _null_skills(cls, value: Any) -> Any:
        return [] if value is None else value


class CandidatePublic(Candidate):
    """Candidate as rendered in API responses, with display-only fields.

    ``_id`` repeats ``id`` under the key existing dashboard clients read.
    """

    @computed_field(alias="_id")  # type: ignore[prop-decorator]
    @property
    def document_id(self) -> str:
        return str(self.id)

    @computed_field(alias="statusDisplay")  # type: ignore[prop-decorator]
    @property
    def status_display(self) -> str:
        return STATUS_LABELS.get(self.status.value, self.status.value)

    @computed_field(alias="formattedAppliedDate")  # type: ignore[prop-decorator]
    @property
    def formatted_applied_date(self) -> str:
        d = self.applied_date
        return f"{d.month}/{d.day}/{d.year}"

    @classmethod
    def from_record(cls, record: Candidate) -> CandidatePublic:
        return cls(**record.model_dump())


class CandidateQuery(BaseModel):
    """Filter, sort and pagination window for a listing."""

    status: str | None = None
    search: str | None = None
    sort_by: str = "appliedDate"
    sort_order: SortOrder = SortOrder.desc
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit
