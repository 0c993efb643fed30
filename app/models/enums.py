"""Enum types shared by validation, queries and response shaping.

``CandidateStatus`` mirrors the CHECK constraint in db/schema.sql.
"""

from enum import Enum


class CandidateStatus(str, Enum):
    """Hiring pipeline stage."""
    applied = "applied"
    interview = "interview"
    offer = "offer"
    rejected = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: object) -> "CandidateStatus | None":
        """Return the member for ``value`` or None when it is not a status."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class SortOrder(str, Enum):
    """Direction of a listing sort."""
    asc = "asc"
    desc = "desc"
