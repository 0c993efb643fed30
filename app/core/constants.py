"""Application constants.

Contains display labels, experience buckets and the field vocabulary used
by validation messages and sorting.
"""

# ---------------------------------------------------------------------------
# Status display labels (statusDisplay in API responses)
# ---------------------------------------------------------------------------
STATUS_LABELS: dict[str, str] = {
    "applied": "Applied",
    "interview": "Interview",
    "offer": "Offer",
    "rejected": "Rejected",
}

# ---------------------------------------------------------------------------
# Experience buckets for the per-role histogram.
# (label, lower bound inclusive, upper bound inclusive or None)
# ---------------------------------------------------------------------------
EXPERIENCE_BUCKETS: list[tuple[str, int, int | None]] = [
    ("0-2 years", 0, 2),
    ("3-5 years", 3, 5),
    ("6+ years", 6, None),
]

# ---------------------------------------------------------------------------
# Field limits (mirrored by the CHECK constraints in db/schema.sql)
# ---------------------------------------------------------------------------
NAME_MAX_LENGTH: int = 100
ROLE_MAX_LENGTH: int = 100
NOTES_MAX_LENGTH: int = 1000
PHONE_MAX_LENGTH: int = 20
LOCATION_MAX_LENGTH: int = 100
SOURCE_MAX_LENGTH: int = 100
SKILL_MAX_LENGTH: int = 50
EXPERIENCE_MIN_YEARS: int = 0
EXPERIENCE_MAX_YEARS: int = 50

RESUME_LINK_PATTERN: str = r"^https?://.+"
EMAIL_PATTERN: str = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# ---------------------------------------------------------------------------
# Human labels keyed by the JSON (camelCase) attribute name.
# Used to turn validation errors into "<Label> is required" style messages.
# ---------------------------------------------------------------------------
FIELD_LABELS: dict[str, str] = {
    "name": "Name",
    "role": "Role",
    "experience": "Experience",
    "resumeLink": "Resume link",
    "status": "Status",
    "appliedDate": "Applied date",
    "notes": "Notes",
    "email": "Email",
    "phone": "Phone number",
    "location": "Location",
    "skills": "Skill name",
    "salary": "Salary",
    "source": "Source",
    "page": "Page",
    "limit": "Limit",
    "sortOrder": "Sort order",
}

# Units appended to numeric upper-bound messages
FIELD_UNITS: dict[str, str] = {
    "experience": " years",
}

# ---------------------------------------------------------------------------
# Columns a listing may be sorted by, keyed by the JSON attribute name.
# ---------------------------------------------------------------------------
SORTABLE_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "role": "role",
    "experience": "experience",
    "resumeLink": "resume_link",
    "status": "status",
    "appliedDate": "applied_date",
    "notes": "notes",
    "email": "email",
    "phone": "phone",
    "location": "location",
    "salary": "salary",
    "source": "source",
    "skills": "skills",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
