from supabase import Client
from app.modules.analytics.schemas import AnalyticsResponse, AnalyticsTotals, TopSvg, ProjectPerformance
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.core.aggregates import fetch_svg_totals, fetch_project_totals, SvgTotals
from app.core.formatting import storage_label
from app.core.query_cache import query_cache, ANALYTICS
from app.core.session import SessionContext
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown"


class AnalyticsService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def _load(self, user_id: str) -> AnalyticsResponse:
        totals = fetch_svg_totals(self.supabase, lambda q: q.eq("user_id", user_id))
        projects = self.supabase.table(PROJECTS_TABLE)\
            .select("id, name, color")\
            .eq("user_id", user_id)\
            .execute().data or []
        top = self.supabase.table(SVGS_TABLE)\
            .select("id, name, views, downloads, favorited, project_id")\
            .eq("user_id", user_id)\
            .order("views", desc=True)\
            .limit(5)\
            .execute().data or []
        per_project = fetch_project_totals(self.supabase, [p["id"] for p in projects])
        project_names = {p["id"]: p["name"] for p in projects}

        performance = []
        for p in projects:
            t = per_project.get(p["id"]) or SvgTotals()
            performance.append(ProjectPerformance(
                id=p["id"],
                name=p["name"],
                color=p.get("color"),
                svgs=t.svg_count,
                views=t.total_views,
                downloads=t.total_downloads,
                storage_bytes=t.total_size,
                storage=storage_label(t.total_size),
            ))
        performance.sort(key=lambda p: p.views, reverse=True)

        return AnalyticsResponse(
            totals=AnalyticsTotals(
                total_views=totals.total_views,
                total_downloads=totals.total_downloads,
                total_favorites=totals.total_favorites,
                total_uploads=totals.svg_count,
                storage_bytes=totals.total_size,
                storage=storage_label(totals.total_size),
            ),
            top_svgs=[TopSvg(
                id=s["id"],
                name=s["name"],
                project=project_names.get(s["project_id"], UNKNOWN_PROJECT),
                views=s.get("views") or 0,
                downloads=s.get("downloads") or 0,
                favorites=1 if s.get("favorited") else 0,
            ) for s in top],
            projects=performance,
        )

    def get_analytics(self) -> AnalyticsResponse:
        """Usage totals, top five svgs by views and per-project performance"""
        user_id = self.session.user_id
        try:
            return query_cache.get_or_load((ANALYTICS, user_id), lambda: self._load(user_id))
        except Exception as e:
            logger.error(f"Error loading analytics for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load analytics")
