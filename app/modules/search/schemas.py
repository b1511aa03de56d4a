from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class SearchSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME = "name"
    VIEWS = "views"
    DOWNLOADS = "downloads"


class SearchResult(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    views: int = 0
    downloads: int = 0
    favorited: bool = False
    file_size: Optional[int] = None
    size: str
    project_id: str
    project_name: Optional[str] = None
    project_color: Optional[str] = None
    created_at: datetime
    uploaded: str


class ProjectFacet(BaseModel):
    id: str
    name: str
    color: Optional[str] = None


class SearchResponse(BaseModel):
    results: List[SearchResult]
    total: int
    projects: List[ProjectFacet]
    tags: List[str]
