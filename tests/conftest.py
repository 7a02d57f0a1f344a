# tests/conftest.py
"""
In-memory stand-ins for the database.

`FakeStore` holds users/reviews/media; `FakeConnection.transaction()` returns a
transaction that snapshots the store on start and restores it on rollback, so
atomicity can be asserted without PostgreSQL. The `fake_repository` fixture
swaps the SQL helpers in `reviews.repository` for functions over the store.
"""

from __future__ import annotations

import copy
from typing import Any

import asyncpg
import pytest
from fastapi.testclient import TestClient

from core import db
from main import app
from reviews import repository as reviews_repository


class FakeStore:
    def __init__(self) -> None:
        self.media: dict[int, str] = {7: "Dune", 8: "Arrival"}
        self.users: dict[int, dict[str, Any]] = {}
        self.reviews: dict[int, dict[str, Any]] = {}
        # Names of repository steps that should raise when called.
        self.fail_on: set[str] = set()

    def snapshot(self) -> tuple[dict, dict]:
        return copy.deepcopy(self.users), copy.deepcopy(self.reviews)

    def restore(self, snapshot: tuple[dict, dict]) -> None:
        self.users, self.reviews = snapshot

    def check(self, step: str) -> None:
        if step in self.fail_on:
            raise ConnectionResetError(f"{step}: connection reset by peer")


class FakeTransaction:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self._snapshot: tuple[dict, dict] | None = None

    async def start(self) -> None:
        self.conn.events.append("begin")
        self.conn.store.check("begin")
        self._snapshot = self.conn.store.snapshot()

    async def commit(self) -> None:
        self.conn.store.check("commit")
        self.conn.events.append("commit")
        self._snapshot = None

    async def rollback(self) -> None:
        self.conn.events.append("rollback")
        if self._snapshot is not None:
            self.conn.store.restore(self._snapshot)
            self._snapshot = None


class FakeConnection:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.events: list[str] = []

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_conn(store: FakeStore) -> FakeConnection:
    return FakeConnection(store)


@pytest.fixture
def fake_repository(monkeypatch: pytest.MonkeyPatch, store: FakeStore) -> FakeStore:
    async def next_user_id(conn):
        store.check("next_user_id")
        return max(store.users, default=0) + 1

    async def insert_user(conn, *, user_id, name, password_hash, email, profile_image, description):
        store.check("insert_user")
        if user_id in store.users:
            raise asyncpg.exceptions.UniqueViolationError("duplicate key value violates unique constraint")
        store.users[user_id] = {
            "name": name,
            "password": password_hash,
            "email": email,
            "profileImage": profile_image,
            "description": description,
        }

    async def next_review_id(conn):
        store.check("next_review_id")
        return max(store.reviews, default=0) + 1

    async def insert_review(conn, *, review_id, media_id, user_id, review, score):
        store.check("insert_review")
        if media_id not in store.media:
            raise asyncpg.exceptions.ForeignKeyViolationError("violates foreign key constraint on mediaID")
        store.reviews[review_id] = {
            "mediaID": media_id,
            "userID": user_id,
            "review": review,
            "score": score,
        }

    async def fetch_submission_summary(conn, *, review_id, media_id):
        store.check("fetch_submission_summary")
        row = store.reviews.get(review_id)
        if row is None:
            return None
        scores = [r["score"] for r in store.reviews.values() if r["mediaID"] == media_id]
        return {
            "user_name": store.users[row["userID"]]["name"],
            "new_review": row["review"],
            "mediaTitle": store.media[row["mediaID"]],
            "avg_score": sum(scores) / len(scores),
        }

    monkeypatch.setattr(reviews_repository, "next_user_id", next_user_id)
    monkeypatch.setattr(reviews_repository, "insert_user", insert_user)
    monkeypatch.setattr(reviews_repository, "next_review_id", next_review_id)
    monkeypatch.setattr(reviews_repository, "insert_review", insert_review)
    monkeypatch.setattr(reviews_repository, "fetch_submission_summary", fetch_submission_summary)
    return store


@pytest.fixture
def client(fake_conn: FakeConnection):
    """
    TestClient without lifespan (no pool); requests get `fake_conn`.
    """
    fake_conn.acquired = 0

    async def override_get_connection():
        fake_conn.acquired += 1
        yield fake_conn

    app.dependency_overrides[db.get_connection] = override_get_connection
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(db.get_connection, None)


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    return {
        "name": "Ann",
        "password": "x",
        "email": "a@b.com",
        "mediaID": 7,
        "review": "Great",
        "score": 9,
    }
