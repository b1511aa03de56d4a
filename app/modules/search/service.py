from supabase import Client
from app.modules.search.schemas import SearchSort, SearchResult, ProjectFacet, SearchResponse
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.core.formatting import relative_time, size_label, normalize_tags, contains_pattern
from app.core.session import SessionContext
from typing import List, Optional, Union
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

_ORDER = {
    SearchSort.NEWEST: ("created_at", True),
    SearchSort.OLDEST: ("created_at", False),
    SearchSort.NAME: ("name", False),
    SearchSort.VIEWS: ("views", True),
    SearchSort.DOWNLOADS: ("downloads", True),
}


class SearchService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def search(
        self,
        q: Optional[str] = None,
        project_id: Optional[str] = None,
        tags: Union[str, List[str], None] = None,
        favorites_only: bool = False,
        sort: SearchSort = SearchSort.NEWEST
    ) -> SearchResponse:
        """
        Search the caller's SVGs.

        q matches the name case-insensitively. Every selected tag must be
        present on a result. The response also carries the facets to filter by:
        the caller's projects and every tag they have used.
        """
        user_id = self.session.user_id
        selected_tags = normalize_tags(tags)
        column, desc = _ORDER[sort]
        try:
            query = self.supabase.table(SVGS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)
            if q and q.strip():
                query = query.ilike("name", contains_pattern(q.strip()))
            if project_id:
                query = query.eq("project_id", project_id)
            if selected_tags:
                query = query.contains("tags", selected_tags)
            if favorites_only:
                query = query.eq("favorited", True)
            rows = query.order(column, desc=desc).execute().data or []

            projects = self.supabase.table(PROJECTS_TABLE)\
                .select("id, name, color")\
                .eq("user_id", user_id)\
                .order("name")\
                .execute().data or []
            tag_rows = self.supabase.table(SVGS_TABLE)\
                .select("tags")\
                .eq("user_id", user_id)\
                .execute().data or []
        except Exception as e:
            logger.error(f"Search failed for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Search failed")

        by_id = {p["id"]: p for p in projects}
        results = []
        for row in rows:
            project = by_id.get(row["project_id"], {})
            results.append(SearchResult(
                **row,
                size=size_label(row.get("file_size")),
                project_name=project.get("name"),
                project_color=project.get("color"),
                uploaded=relative_time(row.get("created_at")),
            ))
        all_tags = sorted({tag for r in tag_rows for tag in (r.get("tags") or [])}, key=str.lower)
        return SearchResponse(
            results=results,
            total=len(results),
            projects=[ProjectFacet(**p) for p in projects],
            tags=all_tags,
        )
