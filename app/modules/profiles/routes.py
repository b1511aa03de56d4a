from fastapi import APIRouter, Depends, UploadFile, File
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, ProfileOverviewResponse,
    AvatarUploadResponse, AccountExportResponse
)
from app.modules.profiles.service import ProfileService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> ProfileService:
    return ProfileService(supabase, session)


@router.get("", response_model=ProfileOverviewResponse)
async def get_profile(service: ProfileService = Depends(get_profile_service)):
    """Profile page: identity, profile fields and quick stats"""
    return service.get_overview()


@router.put("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    return service.update_profile(profile_data)


@router.post("/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service)
):
    """Upload a profile picture (image/*, 5MB max)"""
    return await service.upload_avatar(file)


@router.get("/export", response_model=AccountExportResponse)
async def export_account_data(service: ProfileService = Depends(get_profile_service)):
    """Download account data (profile, projects, SVG metadata)"""
    return service.export_account_data()
