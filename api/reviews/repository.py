"""
Review persistence (raw SQL).

The submission helpers take an explicit connection: they are steps of one
transaction and must all run on the connection that opened it. The listing
query borrows a pooled connection through `core.db`.

Identifier allocation is "current max + 1", read inside the transaction.
Two concurrent submissions can read the same max and collide on the primary
key; the loser fails its insert and rolls back.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def next_user_id(conn: asyncpg.Connection) -> int:
    max_id = await conn.fetchval("SELECT MAX(userID) FROM users")
    return int(max_id or 0) + 1


async def insert_user(
    conn: asyncpg.Connection,
    *,
    user_id: int,
    name: str,
    password_hash: str,
    email: str,
    profile_image: str | None,
    description: str | None,
) -> None:
    await conn.execute(
        """
        INSERT INTO users (userID, name, password, email, profileImage, description)
        VALUES ($1, $2, $3, $4, $5, $6)
        """,
        user_id,
        name,
        password_hash,
        email,
        profile_image,
        description,
    )


async def next_review_id(conn: asyncpg.Connection) -> int:
    max_id = await conn.fetchval("SELECT MAX(userReviewID) FROM user_reviews")
    return int(max_id or 0) + 1


async def insert_review(
    conn: asyncpg.Connection,
    *,
    review_id: int,
    media_id: int,
    user_id: int,
    review: str,
    score: int,
) -> None:
    await conn.execute(
        """
        INSERT INTO user_reviews (userReviewID, mediaID, userID, review, score)
        VALUES ($1, $2, $3, $4, $5)
        """,
        review_id,
        media_id,
        user_id,
        review,
        score,
    )


async def fetch_submission_summary(
    conn: asyncpg.Connection,
    *,
    review_id: int,
    media_id: int,
) -> dict[str, Any] | None:
    """
    Author name, review text and media title for one review, plus the current
    average score of that media (the new review included).
    """
    row = await conn.fetchrow(
        """
        SELECT
          u.name AS user_name,
          ur.review AS new_review,
          m.mediaTitle AS "mediaTitle",
          (
            SELECT AVG(score)::float8
            FROM user_reviews
            WHERE mediaID = $1
          ) AS avg_score
        FROM user_reviews ur
        JOIN users u ON ur.userID = u.userID
        JOIN media m ON ur.mediaID = m.mediaID
        WHERE ur.userReviewID = $2
        LIMIT 1
        """,
        media_id,
        review_id,
    )
    return dict(row) if row is not None else None


async def list_review_patterns(*, min_score: int, media_id: int | None = None) -> list[dict[str, Any]]:
    """
    Reviews scoring at least `min_score`, optionally for one media item.
    Best scores first, then by reviewer and title.
    """
    return await db.fetch_all(
        """
        SELECT
          u.name AS "userName",
          m.mediaTitle AS "mediaTitle",
          ur.review,
          ur.score
        FROM user_reviews ur
        JOIN users u ON ur.userID = u.userID
        JOIN media m ON ur.mediaID = m.mediaID
        WHERE ur.score >= $1
          AND ($2::int IS NULL OR ur.mediaID = $2)
        ORDER BY ur.score DESC, u.name, m.mediaTitle
        """,
        min_score,
        media_id,
    )
