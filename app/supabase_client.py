from fastapi import Request
from supabase import Client, create_client

from .config import Settings


def build_supabase_client(settings: Settings) -> Client:
    """
    Creates the Supabase client used for both the comments table and token checks.
    Called once from the application lifespan; the instance lives on app.state.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def get_supabase_client(request: Request) -> Client:
    return request.app.state.supabase
