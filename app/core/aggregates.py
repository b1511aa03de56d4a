"""
SVG usage aggregation.

Sums are requested from PostgREST with aggregate selects
(alias:column.sum()). When the backend has aggregates disabled the same
numbers are computed by scanning the rows page by page.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, List, Optional
from supabase import Client
from app.config import settings
from app.modules.svgs.models import SVGS_TABLE
import logging

logger = logging.getLogger(__name__)

QueryFilter = Callable[[Any], Any]

_TOTALS_SELECT = (
    "svg_count:id.count(),total_views:views.sum(),"
    "total_downloads:downloads.sum(),total_size:file_size.sum()"
)
_FAVORITES_SELECT = "total_favorites:id.count()"
_SCAN_COLUMNS = "id,project_id,views,downloads,favorited,file_size"


@dataclass
class SvgTotals:
    svg_count: int = 0
    total_views: int = 0
    total_downloads: int = 0
    total_favorites: int = 0
    total_size: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def summarize_svgs(rows: Iterable[Dict[str, Any]]) -> SvgTotals:
    """Client-side reducer over already fetched rows."""
    totals = SvgTotals()
    for row in rows:
        totals.svg_count += 1
        totals.total_views += row.get("views") or 0
        totals.total_downloads += row.get("downloads") or 0
        totals.total_favorites += 1 if row.get("favorited") else 0
        totals.total_size += row.get("file_size") or 0
    return totals


def summarize_by_project(rows: Iterable[Dict[str, Any]]) -> Dict[str, SvgTotals]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        grouped.setdefault(row.get("project_id"), []).append(row)
    return {project_id: summarize_svgs(items) for project_id, items in grouped.items()}


def _int(value: Any) -> int:
    return int(value or 0)


def _scan_rows(supabase: Client, apply: QueryFilter) -> List[Dict[str, Any]]:
    page_size = max(1, settings.aggregate_page_size)
    rows: List[Dict[str, Any]] = []
    start = 0
    while True:
        query = apply(supabase.table(SVGS_TABLE).select(_SCAN_COLUMNS))
        page = query.order("id").range(start, start + page_size - 1).execute().data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows
        start += page_size


def fetch_svg_totals(supabase: Client, apply: QueryFilter) -> SvgTotals:
    """Totals over the svgs selected by apply(query)."""
    try:
        totals_rows = apply(supabase.table(SVGS_TABLE).select(_TOTALS_SELECT)).execute().data or []
        favorites_rows = apply(
            supabase.table(SVGS_TABLE).select(_FAVORITES_SELECT)
        ).eq("favorited", True).execute().data or []
    except Exception as e:
        logger.warning(f"Aggregate query rejected, scanning rows instead: {e}")
        return summarize_svgs(_scan_rows(supabase, apply))
    row = totals_rows[0] if totals_rows else {}
    favorites = favorites_rows[0] if favorites_rows else {}
    return SvgTotals(
        svg_count=_int(row.get("svg_count")),
        total_views=_int(row.get("total_views")),
        total_downloads=_int(row.get("total_downloads")),
        total_favorites=_int(favorites.get("total_favorites")),
        total_size=_int(row.get("total_size")),
    )


def fetch_project_totals(supabase: Client, project_ids: List[str]) -> Dict[str, SvgTotals]:
    """Per-project totals, grouped by the backend. Projects without svgs are absent."""
    if not project_ids:
        return {}
    apply = lambda q: q.in_("project_id", project_ids)
    try:
        totals_rows = apply(
            supabase.table(SVGS_TABLE).select(f"project_id,{_TOTALS_SELECT}")
        ).execute().data or []
        favorites_rows = apply(
            supabase.table(SVGS_TABLE).select(f"project_id,{_FAVORITES_SELECT}")
        ).eq("favorited", True).execute().data or []
    except Exception as e:
        logger.warning(f"Grouped aggregate query rejected, scanning rows instead: {e}")
        return summarize_by_project(_scan_rows(supabase, apply))
    favorites: Dict[Optional[str], int] = {
        r.get("project_id"): _int(r.get("total_favorites")) for r in favorites_rows
    }
    return {
        r["project_id"]: SvgTotals(
            svg_count=_int(r.get("svg_count")),
            total_views=_int(r.get("total_views")),
            total_downloads=_int(r.get("total_downloads")),
            total_favorites=favorites.get(r["project_id"], 0),
            total_size=_int(r.get("total_size")),
        )
        for r in totals_rows
    }
