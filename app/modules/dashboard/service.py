from supabase import Client
from app.modules.dashboard.schemas import DashboardResponse, DashboardStats, RecentSvg, DashboardProject
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.core.aggregates import fetch_svg_totals, fetch_project_totals
from app.core.formatting import relative_time, day_label, size_label
from app.core.query_cache import query_cache, DASHBOARD
from app.core.session import SessionContext
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)
RECENT_SVG_LIMIT = 4
PROJECT_LIMIT = 6


class DashboardService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def _load(self, user_id: str) -> DashboardResponse:
        now = datetime.now(timezone.utc)
        totals = fetch_svg_totals(self.supabase, lambda q: q.eq("user_id", user_id))
        project_count = self.supabase.table(PROJECTS_TABLE)\
            .select("id", count="exact", head=True)\
            .eq("user_id", user_id)\
            .execute().count or 0
        recent_count = self.supabase.table(SVGS_TABLE)\
            .select("id", count="exact", head=True)\
            .eq("user_id", user_id)\
            .gte("created_at", (now - RECENT_WINDOW).isoformat())\
            .execute().count or 0
        recent = self.supabase.table(SVGS_TABLE)\
            .select("id, name, project_id, file_size, created_at")\
            .eq("user_id", user_id)\
            .order("created_at", desc=True)\
            .limit(RECENT_SVG_LIMIT)\
            .execute().data or []
        projects = self.supabase.table(PROJECTS_TABLE)\
            .select("id, name, color, updated_at, created_at")\
            .eq("user_id", user_id)\
            .order("updated_at", desc=True)\
            .limit(PROJECT_LIMIT)\
            .execute().data or []

        project_ids = list({s["project_id"] for s in recent} | {p["id"] for p in projects})
        names = {}
        if project_ids:
            rows = self.supabase.table(PROJECTS_TABLE)\
                .select("id, name")\
                .in_("id", project_ids)\
                .execute().data or []
            names = {r["id"]: r["name"] for r in rows}
        counts = fetch_project_totals(self.supabase, [p["id"] for p in projects])

        return DashboardResponse(
            stats=DashboardStats(
                total_projects=project_count,
                total_svgs=totals.svg_count,
                recent_uploads=recent_count,
                favorites=totals.total_favorites,
            ),
            recent_svgs=[RecentSvg(
                id=s["id"],
                name=s["name"],
                project_id=s["project_id"],
                project_name=names.get(s["project_id"]),
                uploaded=relative_time(s["created_at"], now),
                size=size_label(s.get("file_size")),
                created_at=s["created_at"],
            ) for s in recent],
            projects=[DashboardProject(
                id=p["id"],
                name=p["name"],
                color=p.get("color"),
                svg_count=counts[p["id"]].svg_count if p["id"] in counts else 0,
                updated=day_label(p.get("updated_at") or p.get("created_at"), now),
                updated_at=p.get("updated_at"),
            ) for p in projects],
        )

    def get_dashboard(self) -> DashboardResponse:
        """Stats, the latest uploads and recently updated projects"""
        user_id = self.session.user_id
        try:
            return query_cache.get_or_load((DASHBOARD, user_id), lambda: self._load(user_id))
        except Exception as e:
            logger.error(f"Error loading dashboard for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load dashboard")
