"""
Review submission workflow.

Flow (one connection, one transaction):
1) Begin
2) Allocate a user id (max + 1) and insert the user
3) Allocate a review id (max + 1) and insert the review
4) Read back author/title plus the media's new average score
5) Commit

Any failure rolls the whole transaction back and surfaces as a
TransactionError naming the step, so a review never outlives its user.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, TypeVar

import asyncpg
from pydantic import ValidationError

from core.errors import SubmissionValidationError, TransactionError

from . import repository, schemas, security

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS = ("name", "password", "email", "mediaID", "review", "score")

STAGE_BEGIN = "Transaction start failed"
STAGE_NEXT_USER_ID = "Failed to get next userID"
STAGE_INSERT_USER = "User insert failed"
STAGE_NEXT_REVIEW_ID = "Failed to get next userReviewID"
STAGE_INSERT_REVIEW = "Review insert failed"
STAGE_SUMMARY = "Final data retrieval failed"
STAGE_COMMIT = "Commit failed"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # False and 0 count as missing, like any other falsy scalar.
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def parse_submission(payload: Any) -> schemas.ReviewSubmission:
    """
    Validate a raw JSON body into a ReviewSubmission.

    Raises SubmissionValidationError for the first missing required field
    (in REQUIRED_FIELDS order), then for any malformed field.
    """
    if not isinstance(payload, dict):
        raise SubmissionValidationError("Invalid request body")

    for field in REQUIRED_FIELDS:
        if _is_empty(payload.get(field)):
            raise SubmissionValidationError.missing(field)

    try:
        return schemas.ReviewSubmission.model_validate(payload)
    except ValidationError as exc:
        # Errors carry the alias (the key the client sent) as their location.
        loc = exc.errors()[0]["loc"]
        raise SubmissionValidationError.invalid(str(loc[0]) if loc else "body") from exc


async def _rollback(transaction: asyncpg.transaction.Transaction, stage: str) -> None:
    try:
        await transaction.rollback()
    except Exception:
        # The pool resets the connection on release.
        logger.exception("review_submission_rollback_failed stage=%r", stage)


async def _run_stage(
    transaction: asyncpg.transaction.Transaction,
    stage: str,
    operation: Awaitable[T],
) -> T:
    try:
        return await operation
    except Exception as exc:
        logger.exception("review_submission_failed stage=%r", stage)
        await _rollback(transaction, stage)
        raise TransactionError(stage) from exc


async def submit_review(
    conn: asyncpg.Connection,
    submission: schemas.ReviewSubmission,
) -> schemas.ReviewSummary:
    """
    Persist a new user and their review atomically and summarize the result.

    `conn` must be owned by the caller for the duration of the call.
    """
    # Hashed before the transaction starts.
    password_hash = security.hash_password(submission.password)

    transaction = conn.transaction()
    try:
        await transaction.start()
    except Exception as exc:
        logger.exception("review_submission_failed stage=%r", STAGE_BEGIN)
        raise TransactionError(STAGE_BEGIN) from exc

    user_id = await _run_stage(transaction, STAGE_NEXT_USER_ID, repository.next_user_id(conn))
    await _run_stage(
        transaction,
        STAGE_INSERT_USER,
        repository.insert_user(
            conn,
            user_id=user_id,
            name=submission.name,
            password_hash=password_hash,
            email=submission.email,
            profile_image=submission.profile_image,
            description=submission.description,
        ),
    )

    review_id = await _run_stage(transaction, STAGE_NEXT_REVIEW_ID, repository.next_review_id(conn))
    await _run_stage(
        transaction,
        STAGE_INSERT_REVIEW,
        repository.insert_review(
            conn,
            review_id=review_id,
            media_id=submission.media_id,
            user_id=user_id,
            review=submission.review,
            score=submission.score,
        ),
    )

    row = await _run_stage(
        transaction,
        STAGE_SUMMARY,
        repository.fetch_submission_summary(conn, review_id=review_id, media_id=submission.media_id),
    )
    if row is None:
        logger.error("review_submission_failed stage=%r review_id=%s: summary row missing", STAGE_SUMMARY, review_id)
        await _rollback(transaction, STAGE_SUMMARY)
        raise TransactionError(STAGE_SUMMARY)

    await _run_stage(transaction, STAGE_COMMIT, transaction.commit())

    logger.info(
        "review_submitted user_id=%s review_id=%s media_id=%s",
        user_id,
        review_id,
        submission.media_id,
    )
    return schemas.ReviewSummary(
        user_name=str(row["user_name"]),
        new_review=str(row["new_review"]),
        mediaTitle=str(row["mediaTitle"]),
        avg_score=float(row["avg_score"]),
    )
