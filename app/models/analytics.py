"""Response models for the analytics overview.

These are API-layer response schemas, not table mappings; every value is
computed from candidate rows on request.  Distribution items also carry the
group key as ``_id``, the shape dashboard clients index by.
"""

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from app.models.enums import CandidateStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusBucket(_CamelModel):
    """Count and mean experience for one status."""
    status: CandidateStatus
    count: int = 0
    avg_experience: float = 0.0

    @computed_field(alias="_id")  # type: ignore[prop-decorator]
    @property
    def group_id(self) -> str:
        return self.status.value


class ExperienceBucket(_CamelModel):
    """Number of candidates whose experience falls in ``range``."""
    range: str
    count: int = 0


class RoleBucket(_CamelModel):
    """Candidate count for a role, with its experience histogram."""
    role: str
    count: int = 0
    avg_experience: float = 0.0
    experience_distribution: list[ExperienceBucket] = []

    @computed_field(alias="_id")  # type: ignore[prop-decorator]
    @property
    def group_id(self) -> str:
        return self.role


class AnalyticsOverview(_CamelModel):
    """Payload of GET /api/candidates/analytics/overview."""
    total_candidates: int = 0
    avg_experience: float = 0.0
    recent_activity: int = 0
    status_distribution: list[StatusBucket] = []
    role_distribution: list[RoleBucket] = []
