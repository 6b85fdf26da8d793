from datetime import datetime
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ANONYMOUS_USER_NAME = "Anonymous"


class CamelModel(BaseModel):
    """Wire models: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredComment(BaseModel):
    """
    Shape of a row in the comments table. Only the store adapter decodes this.
    """

    id: str
    book_id: str
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    comment: str
    rating: Optional[int] = None
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None
    is_edited: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # uuid / bigint primary keys both come back as non-str from some drivers
        return str(v) if v is not None else v

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def check_timestamp(cls, v):
        if v is None or isinstance(v, (str, datetime)):
            return v
        raise ValueError(f"unsupported timestamp type {type(v).__name__}")


class Comment(CamelModel):
    id: str
    book_id: str
    user_id: str
    user_name: str = ANONYMOUS_USER_NAME
    user_email: str = ""
    comment: str
    rating: int = Field(0, ge=0, le=5)
    created_at: str
    updated_at: Optional[str] = None
    is_edited: bool = False


class CommentCreate(CamelModel):
    # Required fields are optional here so that missing (or null) ones are
    # reported together by the repository.
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    comment: Optional[str] = None
    rating: Optional[int] = Field(None, ge=0, le=5)


class CommentUpdate(CamelModel):
    comment: Optional[str] = None
    # Omitted or null keeps the current rating.
    rating: Optional[int] = Field(None, ge=0, le=5)


class BookRating(CamelModel):
    average_rating: float = 0
    total_ratings: int = 0
    ratings_count: int = 0


class RatingResponse(CamelModel):
    rating: BookRating


class RatingsResponse(CamelModel):
    ratings: dict[str, BookRating]


class CommentListResponse(CamelModel):
    comments: list[Comment]


class CommentCreatedResponse(CamelModel):
    success: bool = True
    comment: Comment


class SuccessResponse(CamelModel):
    success: bool = True
