# backend/tests/conftest.py

import os

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import copy
import time
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from postgrest.exceptions import APIError

from brain.core.config import settings
from brain.db.session import get_supabase
from brain.main import app


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest request builder for the app's queries."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.count = None

    def select(self, *columns, count=None):
        self.operation = "select"
        self.count = count
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def upsert(self, payload):
        self.operation = "upsert"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.table in self.db.failing_tables:
            raise APIError({"code": "08006", "message": "connection failure", "details": None, "hint": None})
        rows = self.db.tables.setdefault(self.table, [])
        if self.operation in ("insert", "upsert"):
            write = self.db.insert_row if self.operation == "insert" else self.db.upsert_row
            row = write(self.table, self.payload)
            # row-level security can hide the written row from the response
            return FakeResponse([] if self.table in self.db.hidden_tables else [row])
        if self.operation == "delete":
            deleted = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(deleted)

        selected = [copy.deepcopy(row) for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda row: row[column], reverse=desc)
        if self.limit_n is not None:
            selected = selected[: self.limit_n]
        return FakeResponse(selected, count=len(selected) if self.count else None)


class FakeSupabase:
    """In-memory stand-in for supabase.Client, enforcing the schema's unique columns."""

    unique_columns = {
        "share_links": ("token", "user_id"),
        "profiles": ("id",),
        "contents": ("id",),
    }

    def __init__(self):
        self.tables = {}
        self.before_insert = None
        self.inserts = 0
        self.failing_tables = set()
        self.hidden_tables = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def _now(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def insert_row(self, table, payload):
        if self.before_insert:
            self.before_insert(table, payload)
        self.inserts += 1
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._now())
        rows = self.tables.setdefault(table, [])
        for column in self.unique_columns.get(table, ()):
            if any(existing.get(column) == row.get(column) for existing in rows):
                raise APIError({
                    "code": "23505",
                    "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                    "details": f"Key ({column})=({row.get(column)}) already exists.",
                    "hint": None,
                })
        rows.append(row)
        return copy.deepcopy(row)

    def upsert_row(self, table, payload):
        rows = self.tables.setdefault(table, [])
        for existing in rows:
            if existing["id"] == payload["id"]:
                existing.update(payload)
                return copy.deepcopy(existing)
        return self.insert_row(table, payload)

    def add_profile(self, user_id, username):
        return self.insert_row("profiles", {"id": user_id, "username": username})

    def remove_profile(self, user_id):
        self.tables["profiles"] = [row for row in self.tables.get("profiles", []) if row["id"] != user_id]

    def add_content(self, user_id, title, type="article", tags=None):
        return self.insert_row("contents", {
            "user_id": user_id,
            "title": title,
            "link": f"https://example.com/{title.replace(' ', '-')}",
            "type": type,
            "tags": tags or [],
        })


def make_access_token(user_id, email="user@example.com", expires_in=3600, secret=None, audience="authenticated"):
    now = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "iss": f"{settings.SUPABASE_URL}/auth/v1",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm=settings.ALGORITHM)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id, email="user@example.com"):
        return {"Authorization": f"Bearer {make_access_token(user_id, email)}"}
    return _headers


@pytest.fixture
def access_token():
    return make_access_token
