from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.explore.schemas import ExploreSort, PublicProjectResponse, PublicSvgResponse
from app.modules.explore.service import ExploreService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/explore", tags=["explore"])


def get_explore_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> ExploreService:
    return ExploreService(supabase, session)


@router.get("/projects", response_model=List[PublicProjectResponse])
async def list_public_projects(
    q: Optional[str] = None,
    sort: ExploreSort = ExploreSort.TRENDING,
    service: ExploreService = Depends(get_explore_service)
):
    """Trending public collections"""
    return service.list_public_projects(q=q, sort=sort)


@router.get("/svgs", response_model=List[PublicSvgResponse])
async def list_public_svgs(
    q: Optional[str] = None,
    sort: ExploreSort = ExploreSort.TRENDING,
    service: ExploreService = Depends(get_explore_service)
):
    return service.list_public_svgs(q=q, sort=sort)
