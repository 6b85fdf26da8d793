from fastapi import APIRouter, Depends, HTTPException, Query, status
from supabase import Client

from ..config import Settings, get_settings
from ..dependencies import get_comment_repository, get_current_user
from ..repositories.comments import CommentRepository, normalize_id
from ..schemas.comments import (
    Comment,
    CommentCreate,
    CommentCreatedResponse,
    CommentListResponse,
    CommentUpdate,
    SuccessResponse,
)
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/comments", tags=["comments"])


def _require_comment_id(comment_id: str | None) -> str:
    if not comment_id or not comment_id.strip():
        raise HTTPException(status_code=400, detail="Comment ID is required")
    return comment_id.strip()


def _get_owned_comment(repository: CommentRepository, comment_id: str, user: dict) -> Comment:
    """Loads a comment and checks that the acting user wrote it."""
    existing = repository.get(comment_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    if existing.user_id != user["id"]:
        raise HTTPException(status_code=403, detail="You can only modify your own comments")
    return existing


@router.get("", response_model=CommentListResponse, response_model_exclude_none=True)
def list_comments(
    book_id: str | None = Query(None, alias="bookId"),
    repository: CommentRepository = Depends(get_comment_repository),
):
    """Comments for a book, newest first."""
    if not book_id or not book_id.strip():
        raise HTTPException(status_code=400, detail="Book ID is required")
    return CommentListResponse(comments=repository.list_by_book(book_id.strip()))


@router.post(
    "",
    response_model=CommentCreatedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    payload: CommentCreate,
    user=Depends(get_current_user),
    repository: CommentRepository = Depends(get_comment_repository),
    supabase: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
):
    user_id = normalize_id(payload.user_id)
    if user_id and user_id != user["id"]:
        raise HTTPException(status_code=403, detail="Comments can only be posted as yourself")

    created = repository.create(
        book_id=payload.book_id,
        user_id=user_id,
        comment=payload.comment,
        rating=payload.rating,
        user_name=payload.user_name or user.get("name") or None,
        user_email=payload.user_email or user.get("email") or None,
    )
    if created is None:
        raise HTTPException(status_code=500, detail="Failed to add comment")

    log_action(
        supabase,
        user,
        "create",
        "comment",
        created.id,
        {"book_id": created.book_id, "rating": created.rating},
        table=settings.AUDIT_LOG_TABLE,
    )
    return CommentCreatedResponse(comment=created)


@router.put("", response_model=SuccessResponse)
def update_comment(
    payload: CommentUpdate,
    comment_id: str | None = Query(None, alias="commentId"),
    user=Depends(get_current_user),
    repository: CommentRepository = Depends(get_comment_repository),
    supabase: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
):
    comment_id = _require_comment_id(comment_id)
    existing = _get_owned_comment(repository, comment_id, user)

    rating = existing.rating if payload.rating is None else payload.rating
    if not repository.update(comment_id, payload.comment, rating):
        raise HTTPException(status_code=500, detail="Failed to update comment")

    log_action(
        supabase,
        user,
        "update",
        "comment",
        comment_id,
        {"book_id": existing.book_id, "rating": rating},
        table=settings.AUDIT_LOG_TABLE,
    )
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
def delete_comment(
    comment_id: str | None = Query(None, alias="commentId"),
    user=Depends(get_current_user),
    repository: CommentRepository = Depends(get_comment_repository),
    supabase: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
):
    comment_id = _require_comment_id(comment_id)
    existing = _get_owned_comment(repository, comment_id, user)

    if not repository.delete(comment_id):
        raise HTTPException(status_code=500, detail="Failed to delete comment")

    log_action(
        supabase,
        user,
        "delete",
        "comment",
        comment_id,
        {"book_id": existing.book_id},
        table=settings.AUDIT_LOG_TABLE,
    )
    return SuccessResponse()
