"""
Translation between Comment wire models and rows of the comments table.

Rows are validated against StoredComment here and nowhere else; the rest of the
app only sees Comment. Timestamps come back from the store as ISO strings with
an offset (or occasionally naive, or already datetimes) and are normalized to a
single UTC format, YYYY-MM-DDTHH:MM:SS.mmmZ, so that string order is time order.
"""

from datetime import datetime, timezone
from typing import Any

from ..schemas.comments import ANONYMOUS_USER_NAME, Comment, CommentCreate, StoredComment


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def normalize_timestamp(value: Any) -> str | None:
    """
    Returns the UTC calendar string for a store timestamp, or None if absent.
    Raises ValueError for strings that are not ISO 8601.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return format_timestamp(value)


def to_document(payload: CommentCreate, created_at: datetime) -> dict:
    return {
        "book_id": payload.book_id,
        "user_id": payload.user_id,
        "user_name": payload.user_name or ANONYMOUS_USER_NAME,
        "user_email": payload.user_email or "",
        "comment": payload.comment,
        "rating": payload.rating,
        "created_at": created_at.isoformat(),
        "is_edited": False,
    }


def to_update_document(comment: str, rating: int, updated_at: datetime) -> dict:
    return {
        "comment": comment,
        "rating": rating,
        "updated_at": updated_at.isoformat(),
        "is_edited": True,
    }


def from_row(row: dict) -> Comment:
    stored = StoredComment.model_validate(row)
    return Comment(
        id=stored.id,
        book_id=stored.book_id,
        user_id=stored.user_id,
        user_name=stored.user_name or ANONYMOUS_USER_NAME,
        user_email=stored.user_email or "",
        comment=stored.comment,
        rating=stored.rating or 0,
        # Rows written outside this service may lack a creation time.
        created_at=normalize_timestamp(stored.created_at) or format_timestamp(utc_now()),
        updated_at=normalize_timestamp(stored.updated_at),
        is_edited=bool(stored.is_edited),
    )
