from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.analytics.schemas import AnalyticsResponse
from app.modules.analytics.service import AnalyticsService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> AnalyticsService:
    return AnalyticsService(supabase, session)


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(service: AnalyticsService = Depends(get_analytics_service)):
    return service.get_analytics()
