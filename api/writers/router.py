"""
Writer API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from core import db, params
from core.errors import QueryError

from . import repository

router = APIRouter()


@router.get("/query4/writers")
async def get_writers() -> list[dict]:
    try:
        return await repository.list_writers()
    except db.DB_ERRORS as exc:
        raise QueryError("Error fetching writer list") from exc


@router.get("/query4/writerDetails")
async def get_writer_details(writer_id: str | None = Query(default=None, alias="writerID")) -> list[dict]:
    """
    Top-scoring reviews per writer; every writer when `writerID` is omitted.
    """
    writer_filter = params.optional_int(writer_id, name="writerID")
    try:
        return await repository.list_top_reviews_by_writer(writer_id=writer_filter)
    except db.DB_ERRORS as exc:
        raise QueryError("Error retrieving writer details") from exc
