"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, an in-memory stand-in for the
Supabase client (``fake_db``) that understands the PostgREST builder calls
the candidate store makes, and a factory for valid candidate payloads.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")


# ---------------------------------------------------------------------------
# In-memory PostgREST table
# ---------------------------------------------------------------------------

_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T")
_ILIKE_CLAUSE = re.compile(r'(\w+)\.ilike\."((?:[^"\\]|\\.)*)"')


def _comparable(value: Any) -> Any:
    if isinstance(value, str) and _ISO_DATETIME.match(value):
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return value


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs sort last ascending and first descending, as in Postgres
    return (value is None, _comparable(value) if value is not None else 0)


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            out.append(re.escape(next(chars, "")))
        elif ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """One PostgREST request being built against a FakeTable."""

    def __init__(self, table: FakeTable, action: str, payload: Any = None) -> None:
        self._table = table
        self._action = action
        self._payload = payload
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._orders: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None
        self._count = False

    def select(self, *columns: str, count: str | None = None) -> FakeQuery:
        self._count = count == "exact"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(
            lambda row: row.get(column) is not None
            and _comparable(row.get(column)) >= _comparable(value)
        )
        return self

    def or_(self, filters: str) -> FakeQuery:
        clauses = [
            (column, _like_to_regex(re.sub(r"\\(.)", r"\1", quoted)))
            for column, quoted in _ILIKE_CLAUSE.findall(filters)
        ]

        def matches(row: dict[str, Any]) -> bool:
            return any(
                row.get(column) is not None and regex.fullmatch(str(row[column])) is not None
                for column, regex in clauses
            )

        self._filters.append(matches)
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self._orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> FakeQuery:
        self._range = (start, end)
        return self

    def limit(self, size: int) -> FakeQuery:
        self._limit = size
        return self

    def _matching(self) -> list[dict[str, Any]]:
        return [row for row in self._table.rows if all(f(row) for f in self._filters)]

    def execute(self) -> SimpleNamespace:
        self._table.executed.append(self._action)
        if self._table.fail_with is not None:
            raise self._table.fail_with

        if self._action == "insert":
            now = datetime.now(timezone.utc).isoformat()
            row = {"id": str(uuid4()), "created_at": now, "updated_at": now}
            row.update(self._payload)
            self._table.rows.append(row)
            return SimpleNamespace(data=[dict(row)], count=None)

        matched = self._matching()

        if self._action == "update":
            for row in matched:
                row.update(self._payload)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        if self._action == "delete":
            for row in matched:
                self._table.rows.remove(row)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        total = len(matched)
        for column, desc in reversed(self._orders):
            matched.sort(key=lambda r, c=column: _sort_key(r.get(c)), reverse=desc)
        if self._range is not None:
            start, end = self._range
            if self._count and start > 0 and start >= total:
                # PostgREST answers 416 and postgrest-py raises
                raise APIError({
                    "code": "PGRST103",
                    "message": "Requested range not satisfiable",
                    "details": f"An offset of {start} was requested, but there are only {total} rows.",
                    "hint": None,
                })
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[: self._limit]
        return SimpleNamespace(
            data=[dict(r) for r in matched],
            count=total if self._count else None,
        )


class FakeTable:
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.executed: list[str] = []
        self.fail_with: Exception | None = None

    def select(self, *columns: str, count: str | None = None) -> FakeQuery:
        return FakeQuery(self, "select").select(*columns, count=count)

    def insert(self, payload: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "insert", payload)

    def update(self, payload: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "update", payload)

    def delete(self) -> FakeQuery:
        return FakeQuery(self, "delete")


class FakeSupabase:
    """Minimal Supabase client: ``table(name)`` over in-memory tables."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable())

    @property
    def candidates(self) -> FakeTable:
        return self.table("candidates")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_db() -> Generator[FakeSupabase, None, None]:
    """Patch ``get_supabase`` to return an empty in-memory database."""
    client = FakeSupabase()
    with patch("app.db.supabase.get_supabase", return_value=client):
        yield client


@pytest.fixture()
def mock_supabase() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to return a mock Supabase client."""
    mock_client = MagicMock()
    with patch("app.db.supabase.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def candidate_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a valid create payload; keyword overrides replace keys."""

    def _make(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": "Ada Lovelace",
            "role": "Engineer",
            "experience": 3,
            "resumeLink": "https://example.com/resume.pdf",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
