from supabase import Client
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectListItem,
    ProjectDetailResponse, ProjectSvgListResponse, ProjectSvgTotals,
    ProjectPropertiesResponse, RecentUpload, ForkResponse, ProjectSort, ProjectSvgSort
)
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.modules.svgs.schemas import SVGResponse
from app.modules.profiles.service import get_display_names
from app.modules.notifications.service import notify
from app.modules.notifications.models import FORK_NOTIFICATION
from app.core.aggregates import fetch_svg_totals, fetch_project_totals, summarize_svgs
from app.core.dependencies import check_project_owner, get_project_row
from app.core.formatting import contains_pattern
from app.core.query_cache import query_cache, USER_PROJECTS, PROJECT
from app.core.session import SessionContext
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

_PROJECT_ORDER = {
    ProjectSort.RECENT: ("created_at", True),
    ProjectSort.NAME: ("name", False),
    ProjectSort.UPDATED: ("updated_at", True),
}

_SVG_ORDER = {
    ProjectSvgSort.NAME: ("name", False),
    ProjectSvgSort.VIEWS: ("views", True),
    ProjectSvgSort.DOWNLOADS: ("downloads", True),
    ProjectSvgSort.DATE: ("created_at", True),
}


def _round(value: float) -> int:
    # half-up, the way the properties page always displayed it
    return int(value + 0.5)


class ProjectService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def _load_user_projects(self, user_id: str, sort: ProjectSort) -> List[Dict[str, Any]]:
        column, desc = _PROJECT_ORDER[sort]
        result = self.supabase.table(PROJECTS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .order(column, desc=desc)\
            .execute()
        projects = result.data or []
        totals = fetch_project_totals(self.supabase, [p["id"] for p in projects])
        return [
            {**p, "svg_count": totals[p["id"]].svg_count if p["id"] in totals else 0}
            for p in projects
        ]

    def list_projects(self, sort: ProjectSort = ProjectSort.RECENT) -> List[ProjectListItem]:
        """The caller's projects with svg counts"""
        user_id = self.session.user_id
        try:
            rows = query_cache.get_or_load(
                (USER_PROJECTS, user_id, sort.value),
                lambda: self._load_user_projects(user_id, sort)
            )
            return [ProjectListItem(**row) for row in rows]
        except Exception as e:
            logger.error(f"Error listing projects for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load projects")

    def create_project(self, project_data: ProjectCreate) -> ProjectResponse:
        user_id = self.session.user_id
        try:
            result = self.supabase.table(PROJECTS_TABLE).insert({
                "user_id": user_id,
                "name": project_data.name.strip(),
                "description": project_data.description or None,
                "color": project_data.color.value,
                "is_public": project_data.is_public,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")
            query_cache.apply_mutation("project.create")
            logger.info(f"Project {result.data[0]['id']} created by {user_id}")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            raise HTTPException(status_code=500, detail="Failed to create project")

    def _load_project(self, project_id: str) -> Dict[str, Any]:
        """Project row plus owner display name, cached per project"""
        def load():
            project = get_project_row(project_id, self.supabase)
            names = get_display_names(self.supabase, [project["user_id"]])
            return {**project, "owner_display_name": names[project["user_id"]]}
        return query_cache.get_or_load((PROJECT, project_id), load)

    def get_project(self, project_id: str) -> ProjectDetailResponse:
        """Owner, or anyone for public projects. Private projects of others are reported missing."""
        project = self._load_project(project_id)
        is_owner = project["user_id"] == self.session.user_id
        if not is_owner and not project.get("is_public"):
            raise HTTPException(status_code=404, detail="Project not found")
        return ProjectDetailResponse(**project, is_owner=is_owner)

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        """Project settings dialog: owner-only"""
        check_project_owner(project_id, self.session, self.supabase)
        update_data = project_data.model_dump(exclude_unset=True, mode="json")
        if update_data.get("name") is not None:
            update_data["name"] = update_data["name"].strip()
        if "description" in update_data:
            update_data["description"] = update_data["description"] or None
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.supabase.table(PROJECTS_TABLE)\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Project not found")
            query_cache.apply_mutation("project.update")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update project")

    def delete_project(self, project_id: str) -> Dict[str, str]:
        """
        Delete the project's svg rows, then the project.

        The two deletes are not atomic. If the second one fails the project
        is left empty and the delete can be retried. Blobs stay in storage
        since forked svgs may point at the same file_path.
        """
        project = check_project_owner(project_id, self.session, self.supabase)
        try:
            self.supabase.table(SVGS_TABLE)\
                .delete()\
                .eq("project_id", project_id)\
                .execute()
            self.supabase.table(PROJECTS_TABLE)\
                .delete()\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete project")
        finally:
            query_cache.apply_mutation("project.delete")

        logger.info(f"Project {project_id} deleted by {self.session.user_id}")
        return {"message": f'"{project["name"]}" has been deleted'}

    def list_project_svgs(
        self,
        project_id: str,
        q: Optional[str] = None,
        sort: ProjectSvgSort = ProjectSvgSort.DATE
    ) -> ProjectSvgListResponse:
        """Project view: svgs filtered by name and sorted, plus totals over the listed svgs"""
        project = self.get_project(project_id)
        column, desc = _SVG_ORDER[sort]
        try:
            query = self.supabase.table(SVGS_TABLE)\
                .select("*")\
                .eq("project_id", project_id)
            if q:
                query = query.ilike("name", contains_pattern(q))
            result = query.order(column, desc=desc).execute()
        except Exception as e:
            logger.error(f"Error listing svgs of project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load SVGs")

        rows = result.data or []
        totals = summarize_svgs(rows)
        return ProjectSvgListResponse(
            project=project,
            svgs=[SVGResponse(**row) for row in rows],
            totals=ProjectSvgTotals(
                svg_count=totals.svg_count,
                total_views=totals.total_views,
                total_downloads=totals.total_downloads,
                total_favorites=totals.total_favorites,
            ),
        )

    def get_properties(self, project_id: str) -> ProjectPropertiesResponse:
        project = self.get_project(project_id)
        try:
            totals = fetch_svg_totals(self.supabase, lambda q: q.eq("project_id", project_id))
            recent = self.supabase.table(SVGS_TABLE)\
                .select("id, name, file_size, views, downloads, created_at")\
                .eq("project_id", project_id)\
                .order("created_at", desc=True)\
                .limit(5)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading properties of project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load project properties")

        count = totals.svg_count
        return ProjectPropertiesResponse(
            project=project,
            svg_count=count,
            total_views=totals.total_views,
            total_downloads=totals.total_downloads,
            average_views=_round(totals.total_views / count) if count else 0,
            average_downloads=_round(totals.total_downloads / count) if count else 0,
            conversion_rate=(
                _round(totals.total_downloads / totals.total_views * 100) if totals.total_views else 0
            ),
            recent_uploads=[RecentUpload(**row) for row in recent.data or []],
        )

    def fork_project(self, project_id: str) -> ForkResponse:
        """
        Copy a public project (or one of the caller's own) into a new private
        project owned by the caller. SVG rows are duplicated and keep the
        original file_path; no blob is copied.
        """
        user_id = self.session.user_id
        source = get_project_row(project_id, self.supabase)
        if source["user_id"] != user_id and not source.get("is_public"):
            raise HTTPException(status_code=404, detail="Project not found")

        try:
            result = self.supabase.table(PROJECTS_TABLE).insert({
                "user_id": user_id,
                "name": f"{source['name']} (Fork)",
                "description": f"Forked from {source['name']}",
                "color": source.get("color"),
                "is_public": False,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to fork project")
            forked = result.data[0]

            originals = self.supabase.table(SVGS_TABLE)\
                .select("*")\
                .eq("project_id", project_id)\
                .execute()
            copies = [{
                "user_id": user_id,
                "project_id": forked["id"],
                "name": svg["name"],
                "description": svg.get("description"),
                "file_path": svg["file_path"],
                "file_size": svg.get("file_size"),
                "tags": svg.get("tags"),
            } for svg in originals.data or []]
            if copies:
                self.supabase.table(SVGS_TABLE).insert(copies).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error forking project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fork project")
        query_cache.apply_mutation("project.fork")

        if source["user_id"] != user_id:
            notify(
                self.supabase,
                source["user_id"],
                FORK_NOTIFICATION,
                "Project Forked",
                f'{self.session.email or "Someone"} forked your project "{source["name"]}"',
                {
                    "forked_by": user_id,
                    "original_project_id": project_id,
                    "forked_project_id": forked["id"],
                },
            )

        logger.info(f"Project {project_id} forked by {user_id} into {forked['id']}")
        return ForkResponse(
            project=ProjectResponse(**forked),
            svg_count=len(copies),
            message=f'You can now find "{forked["name"]}" in your projects',
        )
