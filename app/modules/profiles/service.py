from supabase import Client
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, ProfileOverviewResponse,
    AvatarUploadResponse, AccountExportResponse
)
from app.modules.profiles.models import PROFILES_TABLE, ANONYMOUS_DISPLAY_NAME
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.core.aggregates import fetch_svg_totals
from app.core.query_cache import query_cache, PROFILE
from app.core.session import SessionContext
from app.config import settings
from typing import Dict, Iterable, Optional, Any
from datetime import datetime, timezone
from fastapi import HTTPException, UploadFile
import os
import time
import logging

logger = logging.getLogger(__name__)


def get_display_names(supabase: Client, user_ids: Iterable[str]) -> Dict[str, str]:
    """Map user_id -> display name; users without a profile or name get 'Anonymous'."""
    ids = sorted({uid for uid in user_ids if uid})
    if not ids:
        return {}
    names = {uid: ANONYMOUS_DISPLAY_NAME for uid in ids}
    try:
        result = supabase.table(PROFILES_TABLE)\
            .select("user_id, display_name")\
            .in_("user_id", ids)\
            .execute()
        for row in result.data or []:
            if row.get("display_name"):
                names[row["user_id"]] = row["display_name"]
    except Exception as e:
        logger.warning(f"Could not load display names: {e}")
    return names


class ProfileService:
    def __init__(self, supabase: Client, session: SessionContext):
        self.supabase = supabase
        self.session = session

    def _load_profile_row(self, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(PROFILES_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        if result is None or not result.data:
            return None
        return result.data

    def get_profile(self) -> ProfileResponse:
        """Get the caller's profile; an empty one when no row exists yet"""
        user_id = self.session.user_id
        try:
            row = query_cache.get_or_load(
                (PROFILE, user_id), lambda: self._load_profile_row(user_id) or {}
            )
        except Exception as e:
            logger.error(f"Error loading profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")
        return ProfileResponse(**{**row, "user_id": user_id})

    def get_overview(self) -> ProfileOverviewResponse:
        """Profile page: identity details, profile fields and quick stats"""
        identity = self.session.user
        profile = self.get_profile()
        try:
            projects = self.supabase.table(PROJECTS_TABLE)\
                .select("id", count="exact", head=True)\
                .eq("user_id", identity.id)\
                .execute()
            totals = fetch_svg_totals(self.supabase, lambda q: q.eq("user_id", identity.id))
        except Exception as e:
            logger.error(f"Error loading profile stats for {identity.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")
        return ProfileOverviewResponse(
            id=identity.id,
            email=identity.email,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            created_at=identity.created_at,
            email_verified=identity.email_confirmed_at is not None,
            last_sign_in_at=identity.last_sign_in_at,
            project_count=projects.count or 0,
            svg_count=totals.svg_count,
        )

    def update_profile(self, profile_data: ProfileUpdate) -> ProfileResponse:
        """Upsert the caller's profile"""
        user_id = self.session.user_id
        try:
            result = self.supabase.table(PROFILES_TABLE).upsert({
                "user_id": user_id,
                "display_name": profile_data.display_name,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="user_id").execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update profile")
            query_cache.apply_mutation("profile.update")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")

    async def upload_avatar(self, file: UploadFile) -> AvatarUploadResponse:
        """Store a profile image in the avatars bucket and point the profile at its public URL"""
        user_id = self.session.user_id
        if not file.content_type or not file.content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="Please select an image file.")
        content = await file.read()
        if len(content) > settings.max_avatar_size_bytes:
            limit_mb = settings.max_avatar_size_bytes // (1024 * 1024)
            raise HTTPException(status_code=400, detail=f"Please select an image smaller than {limit_mb}MB.")

        file_extension = os.path.splitext(file.filename or "")[1].lstrip(".") or "png"
        file_path = f"avatars/{user_id}-{int(time.time() * 1000)}.{file_extension}"
        bucket = self.supabase.storage.from_(settings.avatar_bucket)
        try:
            bucket.upload(file_path, content, file_options={"content-type": file.content_type})
            public_url = bucket.get_public_url(file_path)
            self.supabase.table(PROFILES_TABLE).upsert({
                "user_id": user_id,
                "avatar_url": public_url,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="user_id").execute()
        except Exception as e:
            logger.error(f"Error uploading avatar for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload profile picture.")

        query_cache.apply_mutation("profile.update")
        logger.info(f"Avatar updated for {user_id}: {file_path}")
        return AvatarUploadResponse(avatar_url=public_url, message="Profile picture updated successfully!")

    def export_account_data(self) -> AccountExportResponse:
        """Everything the caller owns, as plain JSON"""
        identity = self.session.user
        try:
            profile = self._load_profile_row(identity.id)
            projects = self.supabase.table(PROJECTS_TABLE)\
                .select("*")\
                .eq("user_id", identity.id)\
                .order("created_at", desc=True)\
                .execute()
            svgs = self.supabase.table(SVGS_TABLE)\
                .select("*")\
                .eq("user_id", identity.id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error exporting data for {identity.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to export account data")
        return AccountExportResponse(
            exported_at=datetime.now(timezone.utc),
            user=identity.model_dump(mode="json"),
            profile=profile,
            projects=projects.data or [],
            svgs=svgs.data or [],
        )
