"""
Request parsing for review submission.
"""

from __future__ import annotations

from fastapi import Request

from core.errors import SubmissionValidationError

from . import schemas, service


async def get_submission(request: Request) -> schemas.ReviewSubmission:
    # Read the body ourselves: missing fields must come back as a 400 with a
    # plain-text message, not as FastAPI's 422 validation payload.
    try:
        payload = await request.json()
    except ValueError as exc:
        raise SubmissionValidationError("Invalid request body") from exc
    return service.parse_submission(payload)
