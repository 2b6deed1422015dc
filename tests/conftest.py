# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - InMemoryStore: a stand-in for SupabaseClient (same class methods,
#   same unique constraints as supabase/schema.sql)
# - Services and a TestClient wired to the in-memory store
# =============================================================================

import copy
import os
import threading
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SEED_ON_STARTUP", "false")

import pytest

from core.models.options import AssessmentOptions
from core.services import (
    Collections,
    IndicatorService,
    QuestionnaireService,
    QuestionService,
)
from lib.supabase_client import DuplicateKeyError


# =============================================================================
# In-Memory Store
# =============================================================================

UNIQUE_CONSTRAINTS = {
    "indicators": [("subject", "topic")],
    "questions": [("name",)],
    "questionnaires": [],
}


class InMemoryStore:
    """
    Dict-backed store with the SupabaseClient interface.

    Rows are deep-copied in and out so callers can't mutate stored state.
    """

    def __init__(self, unique_constraints=None):
        self.tables: dict[str, dict[str, dict]] = {}
        self.unique_constraints = unique_constraints or UNIQUE_CONSTRAINTS
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _table(self, table):
        return self.tables.setdefault(table, {})

    def _check_unique(self, table, row, exclude_id=None):
        for fields in self.unique_constraints.get(table, []):
            key = tuple(row.get(f) for f in fields)
            for other_id, other in self._table(table).items():
                if other_id == exclude_id:
                    continue
                if tuple(other.get(f) for f in fields) == key:
                    raise DuplicateKeyError(table, f"duplicate key value violates unique constraint {fields}")

    # Reads

    def fetch_row(self, table, row_id):
        self.calls.append(("fetch_row", table))
        row = self._table(table).get(str(row_id))
        return copy.deepcopy(row) if row else None

    def find_row(self, table, criteria):
        self.calls.append(("find_row", table))
        for row in self._table(table).values():
            if all(str(row.get(k)) == str(v) for k, v in criteria.items()):
                return copy.deepcopy(row)
        return None

    def fetch_rows(self, table, ids, columns=None):
        self.calls.append(("fetch_rows", table))
        wanted = {str(i) for i in ids}
        rows = [row for row_id, row in self._table(table).items() if row_id in wanted]
        if columns:
            rows = [{c: row.get(c) for c in columns} for row in rows]
        return copy.deepcopy(rows)

    def list_rows(
        self,
        table,
        *,
        filters=None,
        search=None,
        search_fields=None,
        sort=None,
        skip=0,
        limit=10,
        columns=None,
    ):
        self.calls.append(("list_rows", table))
        rows = list(self._table(table).values())

        for field, values in (filters or {}).items():
            accepted = {str(v) for v in values}
            rows = [row for row in rows if str(row.get(field)) in accepted]

        if search and search_fields:
            needle = search.lower()
            rows = [
                row for row in rows
                if any(needle in str(row.get(f) or "").lower() for f in search_fields)
            ]

        for field, descending in reversed(sort or []):
            rows.sort(
                key=lambda row: (row.get(field) is None, str(row.get(field) or "")),
                reverse=descending,
            )

        total = len(rows)
        page = rows[skip:skip + limit]
        if columns:
            page = [{c: row.get(c) for c in columns} for row in page]
        return copy.deepcopy(page), total

    # Writes

    def insert_row(self, table, data):
        self.calls.append(("insert_row", table))
        with self._lock:
            row = copy.deepcopy(data)
            row_id = str(row.get("id") or uuid4())
            row["id"] = row_id
            if row_id in self._table(table):
                raise DuplicateKeyError(table, "duplicate key value violates unique constraint pkey")
            self._check_unique(table, row)
            self._table(table)[row_id] = row
            return copy.deepcopy(row)

    def update_row(self, table, row_id, data):
        self.calls.append(("update_row", table))
        with self._lock:
            existing = self._table(table).get(str(row_id))
            if existing is None:
                return None
            updated = {**existing, **copy.deepcopy(data), "id": str(row_id)}
            self._check_unique(table, updated, exclude_id=str(row_id))
            self._table(table)[str(row_id)] = updated
            return copy.deepcopy(updated)

    def delete_row(self, table, row_id):
        self.calls.append(("delete_row", table))
        with self._lock:
            return self._table(table).pop(str(row_id), None)

    def ping(self, table):
        self.calls.append(("ping", table))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def options():
    """Default assessment value sets."""
    return AssessmentOptions()


@pytest.fixture
def collections():
    return Collections()


@pytest.fixture
def indicator_service(options, store, collections):
    return IndicatorService(options, store, collections=collections)


@pytest.fixture
def question_service(options, store, collections):
    return QuestionService(options, store, collections=collections)


@pytest.fixture
def questionnaire_service(options, store, collections):
    return QuestionnaireService(options, store, collections=collections)


@pytest.fixture
def water_supply(indicator_service):
    """A stored Water / Water Supply indicator."""
    return indicator_service.create({"subject": "Water", "topic": "Water Supply"})


@pytest.fixture
def client(store):
    """TestClient whose requests hit the in-memory store."""
    from fastapi.testclient import TestClient

    from app.dependencies import get_store
    from app.main import app

    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
