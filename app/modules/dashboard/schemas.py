from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class DashboardStats(BaseModel):
    total_projects: int
    total_svgs: int
    recent_uploads: int
    favorites: int


class RecentSvg(BaseModel):
    id: str
    name: str
    project_id: str
    project_name: Optional[str] = None
    uploaded: str
    size: str
    created_at: datetime


class DashboardProject(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    svg_count: int
    updated: str
    updated_at: Optional[datetime] = None


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_svgs: List[RecentSvg]
    projects: List[DashboardProject]
