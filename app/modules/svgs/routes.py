from fastapi import APIRouter, Depends, Response
from app.database.supabase_client import get_supabase
from app.modules.svgs.schemas import (
    SVGUpdate, SVGResponse, SVGPreviewResponse, FavoriteResponse, SVGContentResponse
)
from app.modules.svgs.models import SVG_CONTENT_TYPE
from app.modules.svgs.service import SVGService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from urllib.parse import quote

router = APIRouter(prefix="/svgs", tags=["svgs"])


def get_svg_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> SVGService:
    return SVGService(supabase, session)


@router.get("/{svg_id}", response_model=SVGPreviewResponse)
async def get_svg_preview(svg_id: str, service: SVGService = Depends(get_svg_service)):
    """SVG details with project and owner; records a view"""
    return service.get_preview(svg_id)


@router.put("/{svg_id}", response_model=SVGResponse)
async def update_svg(
    svg_id: str,
    svg_data: SVGUpdate,
    service: SVGService = Depends(get_svg_service)
):
    return service.update_svg(svg_id, svg_data)


@router.post("/{svg_id}/favorite", response_model=FavoriteResponse)
async def toggle_favorite(svg_id: str, service: SVGService = Depends(get_svg_service)):
    return service.toggle_favorite(svg_id)


@router.get("/{svg_id}/download")
async def download_svg(svg_id: str, service: SVGService = Depends(get_svg_service)):
    """Download the SVG file; records a download"""
    content, filename = service.download(svg_id)
    return Response(
        content=content,
        media_type=SVG_CONTENT_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
            "Content-Security-Policy": "default-src 'none'; style-src 'unsafe-inline'",
        }
    )


@router.get("/{svg_id}/content", response_model=SVGContentResponse)
async def get_svg_content(svg_id: str, service: SVGService = Depends(get_svg_service)):
    """Sanitized markup for inline rendering and copy"""
    return service.get_content(svg_id)
