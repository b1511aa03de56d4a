from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dashboard.schemas import DashboardResponse
from app.modules.dashboard.service import DashboardService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> DashboardService:
    return DashboardService(supabase, session)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_dashboard()
