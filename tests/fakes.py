"""
In-memory stand-in for the parts of supabase-py the services call:
table query builder, auth (user lookup and admin API) and storage buckets.
"""

import copy
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser


class FakeResult:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeAPIError(Exception):
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


def _comparable(value):
    if isinstance(value, str):
        try:
            return date_parser.isoparse(value)
        except (ValueError, OverflowError):
            return value
    return value


def _like(pattern: str, value, case_insensitive: bool) -> bool:
    if value is None:
        return False
    regex = "^" + ".*".join(re.escape(part) for part in pattern.split("%")) + "$"
    flags = re.IGNORECASE if case_insensitive else 0
    return re.match(regex, str(value), flags) is not None


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.action = "select"
        self.payload = None
        self.on_conflict = None
        self.count_mode = None
        self.head = False
        self.filters: List = []
        self.order_by: List = []
        self.range_bounds = None
        self.limit_n = None
        self.single_mode = None

    # builders

    def select(self, columns: str = "*", count: Optional[str] = None, head: bool = False):
        if self.action == "select":
            self.count_mode = count
            self.head = head
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict: str = "id"):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and _comparable(row.get(column)) >= _comparable(value))
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and _comparable(row.get(column)) <= _comparable(value))
        return self

    def is_(self, column, value):
        if value in ("null", None):
            self.filters.append(lambda row: row.get(column) is None)
        else:
            self.filters.append(lambda row: row.get(column) == value)
        return self

    def like(self, column, pattern):
        self.filters.append(lambda row: _like(pattern, row.get(column), False))
        return self

    def ilike(self, column, pattern):
        self.filters.append(lambda row: _like(pattern, row.get(column), True))
        return self

    def order(self, column, desc: bool = False):
        self.order_by.append((column, desc))
        return self

    def range(self, start, end):
        self.range_bounds = (start, end)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    # execution

    def _rows(self) -> List[Dict[str, Any]]:
        return self.db.tables.setdefault(self.table_name, [])

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def _store(self, row: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.db.clock())
        self._rows().append(row)
        return row

    def execute(self):
        self.db.calls.append((self.table_name, self.action))
        error = self.db.failures.get((self.table_name, self.action)) or self.db.failures.get((self.table_name, "*"))
        if error:
            raise error

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResult(data=[copy.deepcopy(self._store(r)) for r in payload])

        if self.action == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in self.on_conflict.split(",")]
            written = []
            for item in payload:
                existing = next(
                    (r for r in self._rows() if all(r.get(k) == item.get(k) for k in keys)), None
                )
                if existing is not None:
                    existing.update(item)
                    written.append(copy.deepcopy(existing))
                else:
                    written.append(copy.deepcopy(self._store(item)))
            return FakeResult(data=written)

        if self.action == "update":
            updated = []
            for row in self._rows():
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return FakeResult(data=updated)

        if self.action == "delete":
            removed = [r for r in self._rows() if self._matches(r)]
            self.db.tables[self.table_name] = [r for r in self._rows() if not self._matches(r)]
            return FakeResult(data=copy.deepcopy(removed))

        rows = [copy.deepcopy(r) for r in self._rows() if self._matches(r)]
        for column, desc in reversed(self.order_by):
            rows.sort(key=lambda r: (r.get(column) is None, _comparable(r.get(column))), reverse=desc)
        total = len(rows)
        if self.range_bounds:
            start, end = self.range_bounds
            rows = rows[start:end + 1]
        if self.limit_n is not None:
            rows = rows[:self.limit_n]
        count = total if self.count_mode else None

        if self.single_mode == "maybe":
            return FakeResult(data=rows[0], count=count) if rows else None
        if self.single_mode == "single":
            if len(rows) != 1:
                raise FakeAPIError("JSON object requested, multiple (or no) rows returned", code="PGRST116")
            return FakeResult(data=rows[0], count=count)
        if self.head:
            return FakeResult(data=[], count=count)
        return FakeResult(data=rows, count=count)


def make_user(user_id: str, email: str, **metadata) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=dict(metadata),
        app_metadata={},
        created_at="2024-01-01T00:00:00+00:00",
    )


class FakeAdminAuth:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def list_users(self, page: int = 1, per_page: int = 50):
        return list(self.auth.users.values())

    def get_user_by_id(self, user_id):
        user = self.auth.users.get(user_id)
        if user is None:
            raise FakeAPIError("User not found")
        return SimpleNamespace(user=user)

    def delete_user(self, user_id):
        if user_id not in self.auth.users:
            raise FakeAPIError("User not found")
        del self.auth.users[user_id]
        self.auth.tokens = {t: uid for t, uid in self.auth.tokens.items() if uid != user_id}

    def update_user_by_id(self, user_id, attributes):
        user = self.auth.users.get(user_id)
        if user is None:
            raise FakeAPIError("User not found")
        if "user_metadata" in attributes:
            user.user_metadata = dict(attributes["user_metadata"])
        if "password" in attributes:
            self.auth.passwords[user_id] = attributes["password"]
        return SimpleNamespace(user=user)


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, SimpleNamespace] = {}
        self.tokens: Dict[str, str] = {}
        self.passwords: Dict[str, str] = {}
        self.admin = FakeAdminAuth(self)

    def add_user(self, user_id: str, email: str, token: Optional[str] = None, **metadata) -> SimpleNamespace:
        user = make_user(user_id, email, **metadata)
        self.users[user_id] = user
        if token:
            self.tokens[token] = user_id
        return user

    def get_user(self, jwt: Optional[str] = None):
        user_id = self.tokens.get(jwt)
        if user_id is None or user_id not in self.users:
            raise FakeAPIError("invalid JWT")
        return SimpleNamespace(user=self.users[user_id])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def remove(self, paths):
        self.storage.removed.setdefault(self.name, []).extend(paths)
        return [{"name": p} for p in paths]

    def create_signed_url(self, path, expires_in):
        if path in self.storage.missing:
            raise FakeAPIError("Object not found")
        return {"signedURL": f"https://storage.test/{self.name}/{path}?token=signed&expires={expires_in}"}


class FakeStorage:
    def __init__(self):
        self.removed: Dict[str, List[str]] = {}
        self.missing = set()

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self, now: str = "2025-01-01T00:00:00+00:00"):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failures: Dict[tuple, Exception] = {}
        self.calls: List[tuple] = []
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self._now = now

    def clock(self) -> str:
        return self._now

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        stored = []
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            self.tables.setdefault(table, []).append(row)
            stored.append(row)
        return stored

    def fail(self, table: str, action: str = "*", error: Optional[Exception] = None):
        self.failures[(table, action)] = error or FakeAPIError(f"{table} {action} failed")

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])


def iso_in(days: float) -> str:
    """ISO timestamp relative to the real clock"""
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()
