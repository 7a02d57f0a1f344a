"""
Review API schemas (request/response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

MIN_SCORE = 1
MAX_SCORE = 10

# mediaID is a PostgreSQL `integer` column.
MAX_MEDIA_ID = 2**31 - 1


class ReviewSubmission(BaseModel):
    """
    Body of POST /query6/insertReview, keyed by the camelCase names the
    frontend sends. Unknown keys are ignored.

    Presence of required fields is checked before this model runs (see
    service.parse_submission), so the constraints here are about shape.
    """

    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    profile_image: str | None = Field(default=None, alias="profileImage")
    description: str | None = None
    media_id: int = Field(..., alias="mediaID", ge=1, le=MAX_MEDIA_ID)
    review: str = Field(..., min_length=1)
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)

    @field_validator("profile_image", "description", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("media_id", "score", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        # pydantic's lax mode would read true as 1.
        if isinstance(value, bool):
            raise ValueError("must be an integer")
        if isinstance(value, str):
            return value.strip()
        return value


class ReviewSummary(BaseModel):
    user_name: str
    new_review: str
    mediaTitle: str
    avg_score: float
