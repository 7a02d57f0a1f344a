"""
Catalog SQL (raw, read-only).

Listings behind the dropdowns and browse pages: series, media, media types,
genres. PostgreSQL folds unquoted identifiers to lower case, so columns whose
camelCase spelling is part of the JSON response are aliased in quotes.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from core import db

# Media released after this date count as "recent" for the details page.
RECENT_RELEASE_CUTOFF = date(2010, 1, 1)


async def list_series() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT seriesID AS "seriesID", seriesTitle AS "seriesTitle"
        FROM series
        ORDER BY seriesTitle
        """
    )


async def list_media_entries(*, series_id: int | None = None) -> list[dict[str, Any]]:
    """
    Media with genre, type and author, optionally limited to one series.

    Author is rendered "First I. Last", or "First Last" without an initial.
    """
    return await db.fetch_all(
        """
        SELECT
          m.mediaTitle AS "mediaTitle",
          g.genreName AS "genreName",
          mt.name AS "mediaTypeName",
          m.releaseDate AS "releaseDate",
          w.nameFirst
            || COALESCE(' ' || w.nameInitial || '.', '')
            || ' ' || w.nameLast AS "authorFullName"
        FROM media m
        LEFT JOIN genres g ON m.genreName = g.genreName
        LEFT JOIN media_types mt ON m.mediaTypeID = mt.mediaTypeID
        LEFT JOIN writers w ON m.author = w.writerID
        WHERE ($1::int IS NULL OR m.seriesID = $1)
        ORDER BY m.mediaTitle
        """,
        series_id,
    )


async def list_media_titles() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT mediaID AS "mediaID", mediaTitle AS "mediaTitle"
        FROM media
        ORDER BY mediaTitle
        """
    )


async def list_media_types() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT mt.mediaTypeID AS "mediaTypeID", mt.name
        FROM media_types mt
        ORDER BY mt.name
        """
    )


async def count_media_per_genre(*, type_name: str | None = None) -> list[dict[str, Any]]:
    """
    Number of media items per genre.

    Without a type every genre is listed, empty ones with 0. With a type only
    genres holding media of that type appear.
    """
    if type_name is None:
        return await db.fetch_all(
            """
            SELECT g.genreName AS "genreName", COUNT(m.mediaID) AS mediacount
            FROM genres g
            LEFT JOIN media m ON g.genreName = m.genreName
            GROUP BY g.genreName
            ORDER BY g.genreName
            """
        )
    return await db.fetch_all(
        """
        SELECT g.genreName AS "genreName", COUNT(m.mediaID) AS mediacount
        FROM genres g
        JOIN media m ON g.genreName = m.genreName
        JOIN media_types mt ON m.mediaTypeID = mt.mediaTypeID
        WHERE mt.name = $1
        GROUP BY g.genreName
        ORDER BY g.genreName
        """,
        type_name,
    )


async def list_recent_media_titles() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT DISTINCT mediaTitle AS title
        FROM media
        WHERE releaseDate > $1::date
        ORDER BY title ASC
        """,
        RECENT_RELEASE_CUTOFF,
    )


async def list_recent_media_reviews(*, media_title: str | None = None) -> list[dict[str, Any]]:
    """
    Scored reviews of recent media, optionally for one title, by reviewer name.
    """
    return await db.fetch_all(
        """
        SELECT
          u.name AS reviewer,
          m.mediaTitle AS "mediaTitle",
          m.releaseDate AS releasedate,
          ur.score
        FROM media m
        JOIN user_reviews ur ON m.mediaID = ur.mediaID
        JOIN users u ON ur.userID = u.userID
        WHERE m.releaseDate IS NOT NULL
          AND m.releaseDate > $1::date
          AND ur.score IS NOT NULL
          AND ($2::text IS NULL OR m.mediaTitle = $2)
        ORDER BY reviewer ASC
        """,
        RECENT_RELEASE_CUTOFF,
        media_title,
    )
