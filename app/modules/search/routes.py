from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.search.schemas import SearchResponse, SearchSort
from app.modules.search.service import SearchService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/search", tags=["search"])


def get_search_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> SearchService:
    return SearchService(supabase, session)


@router.get("", response_model=SearchResponse)
async def search_svgs(
    q: Optional[str] = None,
    project_id: Optional[str] = None,
    tags: Optional[List[str]] = Query(None),
    favorites_only: bool = False,
    sort: SearchSort = SearchSort.NEWEST,
    service: SearchService = Depends(get_search_service)
):
    """Search your SVGs by name, tags, project and favourites"""
    return service.search(q=q, project_id=project_id, tags=tags, favorites_only=favorites_only, sort=sort)
