from supabase import Client
from app.modules.notifications.schemas import NotificationResponse
from app.modules.notifications.models import NOTIFICATIONS_TABLE
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def notify(
    supabase: Client,
    user_id: str,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None
) -> bool:
    """Fire-and-forget insert. Failures are logged, never raised."""
    try:
        supabase.table(NOTIFICATIONS_TABLE).insert({
            "user_id": user_id,
            "type": type,
            "title": title,
            "message": message,
            "data": data
        }).execute()
        return True
    except Exception as e:
        logger.warning(f"Failed to send {type} notification to {user_id}: {e}")
        return False


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_notifications(self, user_id: str, limit: int = 20) -> List[NotificationResponse]:
        """Newest first"""
        try:
            result = self.supabase.table(NOTIFICATIONS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            return [NotificationResponse(**n) for n in result.data or []]
        except Exception as e:
            logger.error(f"Error listing notifications for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load notifications")
