"""
Query-string helpers shared by the listing endpoints.
"""

from __future__ import annotations

from fastapi import HTTPException, status


def optional_int(raw: str | None, *, name: str) -> int | None:
    """
    Parse an optional integer filter. Absent or blank means "no filter".
    """
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be an integer.",
        ) from exc


def optional_text(raw: str | None) -> str | None:
    value = (raw or "").strip()
    return value or None
