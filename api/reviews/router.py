"""
Review API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from core import db, params
from core.errors import QueryError

from . import dependencies, repository, schemas, service

router = APIRouter()


@router.get("/query2/reviewPatterns", response_model=None)
async def get_review_patterns(
    min_score: int = Query(default=schemas.MIN_SCORE, alias="minScore"),
    media_id: str | None = Query(default=None, alias="mediaID"),
) -> list[dict] | PlainTextResponse:
    """
    Reviews scoring at least `minScore` (1-10), optionally for one media item.
    """
    if min_score < schemas.MIN_SCORE or min_score > schemas.MAX_SCORE:
        return PlainTextResponse("Error. Score outside bounds.", status_code=400)
    media_filter = params.optional_int(media_id, name="mediaID")
    try:
        return await repository.list_review_patterns(min_score=min_score, media_id=media_filter)
    except db.DB_ERRORS as exc:
        raise QueryError("Error retrieving specific review patterns") from exc


@router.post("/query6/insertReview", response_model=schemas.ReviewSummary)
async def insert_review(
    submission: schemas.ReviewSubmission = Depends(dependencies.get_submission),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> schemas.ReviewSummary:
    """
    Create a user and their review in one transaction.

    Returns the author name, review text, media title and the media's new
    average score. The submission is validated before a connection is taken.
    """
    return await service.submit_review(conn, submission)
