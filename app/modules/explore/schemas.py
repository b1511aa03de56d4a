from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class ExploreSort(str, Enum):
    TRENDING = "trending"
    VIEWS = "views"
    DOWNLOADS = "downloads"
    RECENT = "recent"


class PublicProjectResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    owner_display_name: str
    total_views: int = 0
    total_downloads: int = 0
    total_favorites: int = 0
    svg_count: int = 0
    is_owner: bool = False


class PublicSvgResponse(BaseModel):
    id: str
    user_id: str
    project_id: str
    name: str
    description: Optional[str] = None
    file_path: str
    views: int = 0
    downloads: int = 0
    favorited: bool = False
    created_at: datetime
    project_name: str
    project_color: Optional[str] = None
    owner_display_name: str
