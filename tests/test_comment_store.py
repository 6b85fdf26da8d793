"""
Tests for the comment store adapter: row decoding and timestamp normalization.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.repositories.comment_store import (
    format_timestamp,
    from_row,
    normalize_timestamp,
    to_document,
    to_update_document,
)
from app.schemas.comments import CommentCreate


class TestNormalizeTimestamp:
    def test_offset_string(self):
        assert normalize_timestamp("2024-03-01T10:20:30.123456+00:00") == "2024-03-01T10:20:30.123Z"

    def test_zulu_string(self):
        assert normalize_timestamp("2024-03-01T10:20:30Z") == "2024-03-01T10:20:30.000Z"

    def test_non_utc_offset_is_converted(self):
        assert normalize_timestamp("2024-03-01T12:20:30+02:00") == "2024-03-01T10:20:30.000Z"

    def test_naive_string_is_treated_as_utc(self):
        assert normalize_timestamp("2024-03-01T10:20:30.5") == "2024-03-01T10:20:30.500Z"

    def test_datetime(self):
        value = datetime(2024, 3, 1, 10, 20, 30, 999999, tzinfo=timezone(timedelta(hours=-5)))
        assert normalize_timestamp(value) == "2024-03-01T15:20:30.999Z"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        assert normalize_timestamp(value) is None

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            normalize_timestamp("yesterday")

    def test_format_sorts_chronologically(self):
        earlier = format_timestamp(datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
        later = format_timestamp(datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc))
        assert earlier < later


class TestFromRow:
    def test_full_row(self):
        comment = from_row(
            {
                "id": "abc",
                "book_id": "B1",
                "user_id": "U1",
                "user_name": "Reader",
                "user_email": "r@example.com",
                "comment": "Great",
                "rating": 5,
                "created_at": "2024-01-01T00:00:00+00:00",
                "updated_at": "2024-01-02T00:00:00+00:00",
                "is_edited": True,
            }
        )
        assert comment.id == "abc"
        assert comment.rating == 5
        assert comment.created_at == "2024-01-01T00:00:00.000Z"
        assert comment.updated_at == "2024-01-02T00:00:00.000Z"
        assert comment.is_edited is True

    def test_defaults_for_sparse_row(self):
        comment = from_row({"id": 7, "book_id": "B1", "user_id": "U1", "comment": "Hi"})
        assert comment.id == "7"
        assert comment.user_name == "Anonymous"
        assert comment.user_email == ""
        assert comment.rating == 0
        assert comment.updated_at is None
        assert comment.is_edited is False
        assert comment.created_at.endswith("Z")

    def test_rating_out_of_range_is_rejected(self):
        with pytest.raises(ValueError):
            from_row({"id": "x", "book_id": "B1", "user_id": "U1", "comment": "Hi", "rating": 9})

    def test_wire_shape_is_camel_case(self):
        comment = from_row(
            {"id": "x", "book_id": "B1", "user_id": "U1", "comment": "Hi", "created_at": "2024-01-01T00:00:00Z"}
        )
        data = comment.model_dump(by_alias=True, exclude_none=True)
        assert data["bookId"] == "B1"
        assert data["isEdited"] is False
        assert "updatedAt" not in data


class TestDocuments:
    def test_create_document(self):
        created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        doc = to_document(CommentCreate(book_id="B1", user_id="U1", comment="Hi"), created_at)
        assert doc == {
            "book_id": "B1",
            "user_id": "U1",
            "user_name": "Anonymous",
            "user_email": "",
            "comment": "Hi",
            "rating": 0,
            "created_at": "2024-01-01T00:00:00+00:00",
            "is_edited": False,
        }

    def test_update_document_marks_edited(self):
        doc = to_update_document("New text", 2, datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert doc["is_edited"] is True
        assert doc["updated_at"] == "2024-01-01T00:00:00+00:00"
        assert "book_id" not in doc
        assert "user_id" not in doc
