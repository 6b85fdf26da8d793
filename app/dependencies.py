from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from .config import Settings, get_settings
from .repositories.comments import CommentRepository
from .services.ratings import RatingAggregator
from .supabase_client import get_supabase_client

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Validates the incoming Supabase access token and returns the acting user.
    Only the stable id, display name and email are used downstream.
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    try:
        user_response = supabase.auth.get_user(credentials.credentials)
    except Exception as exc:  # pragma: no cover - passthrough
        raise HTTPException(status_code=401, detail="Session expired. Please sign in again.") from exc

    if not user_response or not user_response.user:
        raise HTTPException(status_code=401, detail="Session expired. Please sign in again.")

    supa_user = user_response.user
    metadata = supa_user.user_metadata or {}
    return {
        "id": supa_user.id,
        "email": supa_user.email,
        "name": metadata.get("full_name") or metadata.get("name") or "",
    }


def get_comment_repository(
    supabase: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
) -> CommentRepository:
    return CommentRepository(
        supabase,
        table=settings.COMMENTS_TABLE,
        membership_limit=settings.MEMBERSHIP_FILTER_LIMIT,
    )


def get_rating_aggregator(
    repository: CommentRepository = Depends(get_comment_repository),
) -> RatingAggregator:
    return RatingAggregator(repository)
