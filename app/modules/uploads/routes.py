from fastapi import APIRouter, Depends, UploadFile, File, Form
from app.database.supabase_client import get_supabase
from app.modules.uploads.schemas import UploadResponse
from app.modules.uploads.service import UploadService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/upload", tags=["upload"])


def get_upload_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> UploadService:
    return UploadService(supabase, session)


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_svgs(
    files: List[UploadFile] = File(...),
    project_id: str = Form(...),
    tags: Optional[List[str]] = Form(None),
    description: Optional[str] = Form(None),
    service: UploadService = Depends(get_upload_service)
):
    """
    Upload one or more SVG files into a project.
    Files are accepted by image/svg+xml content type or .svg extension.
    Tags may be repeated or comma-separated.
    """
    return await service.upload_svgs(files, project_id, tags=tags, description=description)
