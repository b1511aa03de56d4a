from supabase import Client
from app.modules.svgs.schemas import (
    SVGUpdate, SVGResponse, SVGPreviewResponse, SVGProjectSummary,
    FavoriteResponse, SVGContentResponse
)
from app.modules.svgs.models import SVGS_TABLE
from app.modules.svgs.storage import SVGStorage
from app.modules.svgs.sanitizer import sanitize_svg, SVGSanitizeError
from app.modules.profiles.service import get_display_names
from app.core.dependencies import (
    check_svg_owner, check_svg_readable, check_project_owner, get_project_row
)
from app.core.formatting import svg_filename
from app.core.query_cache import query_cache
from app.core.session import SessionContext
from typing import Optional, Dict, Any, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class SVGService:
    def __init__(self, supabase: Client, session: SessionContext, storage: Optional[SVGStorage] = None):
        self.supabase = supabase
        self.session = session
        self.storage = storage or SVGStorage(supabase)

    def _increment(self, svg: Dict[str, Any], column: str) -> int:
        """Read-then-write counter bump; concurrent bumps may be lost (last write wins)."""
        new_value = (svg.get(column) or 0) + 1
        self.supabase.table(SVGS_TABLE)\
            .update({column: new_value})\
            .eq("id", svg["id"])\
            .execute()
        return new_value

    def get_preview(self, svg_id: str) -> SVGPreviewResponse:
        """SVG preview page. Every call counts as one view."""
        svg = check_svg_readable(svg_id, self.session, self.supabase)
        try:
            svg["views"] = self._increment(svg, "views")
            query_cache.apply_mutation("svg.view")
        except Exception as e:
            logger.warning(f"Failed to record view for svg {svg_id}: {e}")

        try:
            project = get_project_row(svg["project_id"], self.supabase)
        except HTTPException:
            project = None
        names = get_display_names(
            self.supabase, [svg["user_id"], project["user_id"] if project else None]
        )
        summary = None
        if project:
            summary = SVGProjectSummary(
                id=project["id"],
                name=project["name"],
                description=project.get("description"),
                color=project.get("color"),
                is_public=bool(project.get("is_public")),
                user_id=project["user_id"],
                owner_display_name=names[project["user_id"]],
            )
        return SVGPreviewResponse(
            **svg,
            project=summary,
            owner_display_name=names[svg["user_id"]],
            is_owner=svg["user_id"] == self.session.user_id,
        )

    def update_svg(self, svg_id: str, svg_data: SVGUpdate) -> SVGResponse:
        """Owner-only update of name, description, project and tags"""
        check_svg_owner(svg_id, self.session, self.supabase)
        update_data = svg_data.model_dump(exclude_unset=True)
        if "description" in update_data:
            update_data["description"] = update_data["description"] or None
        if update_data.get("project_id"):
            # the target project must exist and belong to the caller
            check_project_owner(update_data["project_id"], self.session, self.supabase)
        elif "project_id" in update_data:
            del update_data["project_id"]
        if not update_data:
            return SVGResponse(**get_svg(self.supabase, svg_id))

        try:
            result = self.supabase.table(SVGS_TABLE)\
                .update(update_data)\
                .eq("id", svg_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="SVG not found")
            query_cache.apply_mutation("svg.update")
            return SVGResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating svg {svg_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update SVG")

    def toggle_favorite(self, svg_id: str) -> FavoriteResponse:
        svg = check_svg_readable(svg_id, self.session, self.supabase)
        favorited = not svg.get("favorited")
        try:
            self.supabase.table(SVGS_TABLE)\
                .update({"favorited": favorited})\
                .eq("id", svg_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating favorite for svg {svg_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update favorite status")
        query_cache.apply_mutation("svg.favorite")
        message = f'"{svg["name"]}" has been {"added to" if favorited else "removed from"} your favorites'
        return FavoriteResponse(svg_id=svg_id, favorited=favorited, message=message)

    def _read_blob(self, svg: Dict[str, Any]) -> bytes:
        try:
            content = self.storage.download(svg["file_path"])
        except Exception as e:
            logger.error(f"Failed to fetch blob {svg['file_path']} for svg {svg['id']}: {e}")
            content = None
        if not content:
            raise HTTPException(status_code=502, detail="Failed to load SVG")
        return content

    def download(self, svg_id: str) -> Tuple[bytes, str]:
        """File bytes and download filename; counts the download once the file was fetched"""
        svg = check_svg_readable(svg_id, self.session, self.supabase)
        content = self._read_blob(svg)
        try:
            self._increment(svg, "downloads")
            query_cache.apply_mutation("svg.download")
        except Exception as e:
            logger.warning(f"Failed to record download for svg {svg_id}: {e}")
        return content, svg_filename(svg["name"])

    def get_content(self, svg_id: str) -> SVGContentResponse:
        """
        Sanitized markup for inline display and "copy code".

        Copied code is the sanitized markup and can differ from the stored
        file. The untouched bytes are served by download().
        """
        svg = check_svg_readable(svg_id, self.session, self.supabase)
        content = self._read_blob(svg)
        try:
            markup = sanitize_svg(content)
        except SVGSanitizeError as e:
            logger.warning(f"Refusing to render svg {svg_id}: {e}")
            raise HTTPException(status_code=422, detail="SVG file could not be rendered safely")
        return SVGContentResponse(svg_id=svg_id, markup=markup)


def get_svg(supabase: Client, svg_id: str) -> Dict[str, Any]:
    result = supabase.table(SVGS_TABLE)\
        .select("*")\
        .eq("id", svg_id)\
        .maybe_single()\
        .execute()
    if result is None or not result.data:
        raise HTTPException(status_code=404, detail="SVG not found")
    return result.data
