"""
Error types shared by the feature packages, and how they are rendered.

Clients only ever see the short message; the underlying driver error is kept
as `__cause__` and goes to the log.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

logger = logging.getLogger(__name__)


class QueryError(RuntimeError):
    """
    A read query failed.
    """

    def __init__(self, message: str, *, as_json: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.as_json = as_json


class SubmissionValidationError(ValueError):
    """
    A review submission is missing a required field or carries a malformed one.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    @classmethod
    def missing(cls, field: str) -> "SubmissionValidationError":
        return cls(f"Missing required field: {field}", field=field)

    @classmethod
    def invalid(cls, field: str) -> "SubmissionValidationError":
        return cls(f"Invalid field: {field}", field=field)


class TransactionError(RuntimeError):
    """
    A step of the review-submission transaction failed and the work was rolled back.

    `stage` names the step, e.g. "User insert failed".
    """

    def __init__(self, stage: str) -> None:
        super().__init__(stage)
        self.stage = stage


async def query_error_handler(_: Request, exc: QueryError) -> Response:
    logger.error("query_failed message=%r", exc.message, exc_info=exc.__cause__ or exc)
    if exc.as_json:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )
    return PlainTextResponse(exc.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def submission_validation_error_handler(_: Request, exc: SubmissionValidationError) -> Response:
    logger.info("submission_rejected field=%s message=%r", exc.field, exc.message)
    return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)


async def transaction_error_handler(_: Request, exc: TransactionError) -> Response:
    # Rollback has already happened by the time this is raised.
    return PlainTextResponse(exc.stage, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QueryError, query_error_handler)
    app.add_exception_handler(SubmissionValidationError, submission_validation_error_handler)
    app.add_exception_handler(TransactionError, transaction_error_handler)
