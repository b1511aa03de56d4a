from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.notifications.schemas import NotificationResponse
from app.modules.notifications.service import NotificationService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    session: SessionContext = Depends(require_session),
    service: NotificationService = Depends(get_notification_service)
):
    """Notifications addressed to the caller (e.g. someone forked a project)"""
    return service.list_notifications(session.user_id, limit=limit)
