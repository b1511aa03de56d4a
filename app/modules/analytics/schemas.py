from pydantic import BaseModel
from typing import List, Optional


class AnalyticsTotals(BaseModel):
    total_views: int
    total_downloads: int
    total_favorites: int
    total_uploads: int
    storage_bytes: int
    storage: str


class TopSvg(BaseModel):
    id: str
    name: str
    project: str
    views: int
    downloads: int
    favorites: int


class ProjectPerformance(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    svgs: int
    views: int
    downloads: int
    storage_bytes: int
    storage: str


class AnalyticsResponse(BaseModel):
    totals: AnalyticsTotals
    top_svgs: List[TopSvg]
    projects: List[ProjectPerformance]
