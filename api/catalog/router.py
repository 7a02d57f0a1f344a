"""
Catalog API endpoints (read-only listings).

Paths keep the /queryN prefixes the frontend already calls.
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from core import db, params
from core.errors import QueryError

from . import repository

router = APIRouter()


@router.get("/query1/series")
async def get_series() -> list[dict]:
    try:
        return await repository.list_series()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching series list") from exc


@router.get("/query1/mediaEntries")
async def get_media_entries(series_id: str | None = Query(default=None, alias="seriesID")) -> list[dict]:
    """
    Media entries with genre, type, release date and author; all series when
    `seriesID` is omitted or blank.
    """
    series_filter = params.optional_int(series_id, name="seriesID")
    try:
        return await repository.list_media_entries(series_id=series_filter)
    except db.DB_ERRORS as exc:
        raise QueryError("Error retrieving media entries") from exc


@router.get("/query2/mediaTitles")
async def get_media_titles() -> list[dict]:
    try:
        return await repository.list_media_titles()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching media titles") from exc


@router.get("/query3/mediaTypes")
async def get_media_types() -> list[dict]:
    try:
        return await repository.list_media_types()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching media type") from exc


@router.get("/query3/genreCountOfType")
async def get_genre_count_of_type(type_name: str | None = Query(default=None, alias="TypeName")) -> list[dict]:
    """
    Media count per genre, restricted to one media type when `TypeName` is given.
    """
    type_filter = params.optional_text(type_name)
    try:
        return await repository.count_media_per_genre(type_name=type_filter)
    except db.DB_ERRORS as exc:
        if type_filter is None:
            raise QueryError("Error fetching genre count") from exc
        raise QueryError(f"Error fetching media type count for {type_filter}") from exc


@router.get("/query5/mediaTitles")
async def get_recent_media_titles() -> list[dict]:
    try:
        return await repository.list_recent_media_titles()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching media titles", as_json=True) from exc


@router.get("/query5/mediaDetails", response_model=None)
async def get_recent_media_details(
    media_title: str | None = Query(default=None, alias="mediaTitle"),
) -> list[dict] | JSONResponse:
    """
    Reviewer scores for media released after 2010, optionally for one title.
    Responds 404 when nothing matches.
    """
    title_filter = params.optional_text(media_title)
    try:
        rows = await repository.list_recent_media_reviews(media_title=title_filter)
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching media data", as_json=True) from exc
    if not rows:
        return JSONResponse(status_code=404, content={"message": "No media found with that name"})
    return rows


@router.get("/query6/mediaTitles")
async def get_media_list() -> list[dict]:
    try:
        return await repository.list_media_titles()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching media list") from exc
