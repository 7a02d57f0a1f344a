"""
Writer SQL (raw, read-only).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_writers() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT writerID AS "writerID", nameFirst AS "nameFirst", nameLast AS "nameLast"
        FROM writers
        ORDER BY nameLast, nameFirst
        """
    )


async def list_top_reviews_by_writer(*, writer_id: int | None = None) -> list[dict[str, Any]]:
    """
    For each writer, the reviews that hit that writer's best score across all
    their media (ties included). Optionally limited to one writer.
    """
    return await db.fetch_all(
        """
        WITH top_scores AS (
          SELECT m2.author, MAX(ur2.score) AS max_score
          FROM user_reviews ur2
          JOIN media m2 ON ur2.mediaID = m2.mediaID
          WHERE ur2.score IS NOT NULL
          GROUP BY m2.author
        )
        SELECT
          m.mediaTitle AS "mediaTitle",
          w.nameLast AS author_lastname,
          mt.name AS media_type,
          ur.review,
          ur.score
        FROM user_reviews ur
        JOIN media m ON ur.mediaID = m.mediaID
        JOIN media_types mt ON m.mediaTypeID = mt.mediaTypeID
        JOIN writers w ON m.author = w.writerID
        JOIN top_scores ts
          ON w.writerID = ts.author
         AND ur.score = ts.max_score
        WHERE ur.score IS NOT NULL
          AND ($1::int IS NULL OR w.writerID = $1)
        ORDER BY ur.score DESC
        """,
        writer_id,
    )
