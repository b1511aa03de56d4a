from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=100)


class ProfileResponse(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileOverviewResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    email_verified: bool
    last_sign_in_at: Optional[datetime] = None
    project_count: int
    svg_count: int


class AvatarUploadResponse(BaseModel):
    avatar_url: str
    message: str


class AccountExportResponse(BaseModel):
    exported_at: datetime
    user: Dict[str, Any]
    profile: Optional[Dict[str, Any]] = None
    projects: List[Dict[str, Any]]
    svgs: List[Dict[str, Any]]
