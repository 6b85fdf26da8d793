import logging
from typing import Optional, Any
from supabase import Client

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def log_action(
    supabase: Client,
    user: dict,
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[Any] = None,
    table: str = "audit_logs",
):
    """
    Records a comment write in the audit log table.
    'user' is the dict returned by get_current_user dependency.
    """
    try:
        log_entry = {
            "user_id": user.get("id"),
            "user_name": user.get("name") or user.get("email"),
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "details": details,
        }
        supabase.table(table).insert(log_entry).execute()
    except Exception:
        # Audit failures must not fail the request that triggered them.
        logger.warning("Failed to write audit log for %s %s", action, resource_id, exc_info=True)
