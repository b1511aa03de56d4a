from supabase import Client
from app.modules.explore.schemas import ExploreSort, PublicProjectResponse, PublicSvgResponse
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.modules.profiles.service import get_display_names
from app.core.aggregates import fetch_project_totals, SvgTotals
from app.core.formatting import parse_timestamp, contains_pattern
from app.core.query_cache import query_cache, PUBLIC_PROJECTS, PUBLIC_SVGS
from app.core.session import SessionContext
from typing import List, Dict, Any, Optional, Callable
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _sort_rows(rows: List[Dict[str, Any]], sort: ExploreSort, trending: Callable[[Dict[str, Any]], int]) -> List[Dict[str, Any]]:
    if sort == ExploreSort.VIEWS:
        key = lambda r: r.get("total_views", r.get("views")) or 0
    elif sort == ExploreSort.DOWNLOADS:
        key = lambda r: r.get("total_downloads", r.get("downloads")) or 0
    elif sort == ExploreSort.RECENT:
        key = lambda r: parse_timestamp(r["created_at"])
    else:
        key = trending
    return sorted(rows, key=key, reverse=True)


class ExploreService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def _public_projects(self, q: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self.supabase.table(PROJECTS_TABLE)\
            .select("id, user_id, name, description, color, created_at")\
            .eq("is_public", True)
        if q:
            query = query.ilike("name", contains_pattern(q))
        return query.execute().data or []

    def _load_projects(self, q: Optional[str], sort: ExploreSort) -> List[Dict[str, Any]]:
        projects = self._public_projects(q)
        totals = fetch_project_totals(self.supabase, [p["id"] for p in projects])
        names = get_display_names(self.supabase, [p["user_id"] for p in projects])
        rows = []
        for p in projects:
            t = totals.get(p["id"]) or SvgTotals()
            rows.append({
                **p,
                "owner_display_name": names[p["user_id"]],
                "total_views": t.total_views,
                "total_downloads": t.total_downloads,
                "total_favorites": t.total_favorites,
                "svg_count": t.svg_count,
            })
        return _sort_rows(
            rows, sort,
            lambda r: r["total_views"] + r["total_downloads"] + r["total_favorites"]
        )

    def list_public_projects(self, q: Optional[str] = None, sort: ExploreSort = ExploreSort.TRENDING) -> List[PublicProjectResponse]:
        """Public projects with usage metrics. Trending = views + downloads + favourites."""
        q = (q or "").strip() or None
        try:
            rows = query_cache.get_or_load(
                (PUBLIC_PROJECTS, q, sort.value), lambda: self._load_projects(q, sort)
            )
        except Exception as e:
            logger.error(f"Error loading public projects: {e}")
            raise HTTPException(status_code=500, detail="Failed to load public projects")
        user_id = self.session.user_id
        return [PublicProjectResponse(**r, is_owner=r["user_id"] == user_id) for r in rows]

    def _load_svgs(self, q: Optional[str], sort: ExploreSort) -> List[Dict[str, Any]]:
        projects = {p["id"]: p for p in self._public_projects()}
        if not projects:
            return []
        query = self.supabase.table(SVGS_TABLE)\
            .select("id, user_id, project_id, name, description, file_path, views, downloads, favorited, created_at")\
            .in_("project_id", list(projects))
        if q:
            query = query.ilike("name", contains_pattern(q))
        svgs = query.execute().data or []
        names = get_display_names(self.supabase, [s["user_id"] for s in svgs])
        rows = [{
            **s,
            "project_name": projects[s["project_id"]]["name"],
            "project_color": projects[s["project_id"]].get("color"),
            "owner_display_name": names[s["user_id"]],
        } for s in svgs]
        return _sort_rows(rows, sort, lambda r: (r.get("views") or 0) + (r.get("downloads") or 0))

    def list_public_svgs(self, q: Optional[str] = None, sort: ExploreSort = ExploreSort.TRENDING) -> List[PublicSvgResponse]:
        """SVGs of public projects. Trending = views + downloads."""
        q = (q or "").strip() or None
        try:
            rows = query_cache.get_or_load(
                (PUBLIC_SVGS, q, sort.value), lambda: self._load_svgs(q, sort)
            )
        except Exception as e:
            logger.error(f"Error loading public svgs: {e}")
            raise HTTPException(status_code=500, detail="Failed to load public SVGs")
        return [PublicSvgResponse(**r) for r in rows]
