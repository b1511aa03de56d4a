from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from app.modules.projects.models import ProjectColor
from app.modules.svgs.schemas import SVGResponse


class ProjectSort(str, Enum):
    RECENT = "recent"
    NAME = "name"
    UPDATED = "updated"


class ProjectSvgSort(str, Enum):
    NAME = "name"
    VIEWS = "views"
    DOWNLOADS = "downloads"
    DATE = "date"


def _name_not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Project name is required")
    return value


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    color: ProjectColor = ProjectColor.BLUE
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        return _name_not_blank(value)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[ProjectColor] = None
    is_public: Optional[bool] = None

    # only description may be cleared with null
    @field_validator("name", "color", "is_public", mode="before")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        return _name_not_blank(value)


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_public: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectListItem(ProjectResponse):
    svg_count: int = 0


class ProjectDetailResponse(ProjectResponse):
    owner_display_name: str
    is_owner: bool


class ProjectSvgTotals(BaseModel):
    svg_count: int
    total_views: int
    total_downloads: int
    total_favorites: int


class ProjectSvgListResponse(BaseModel):
    project: ProjectDetailResponse
    svgs: List[SVGResponse]
    totals: ProjectSvgTotals


class RecentUpload(BaseModel):
    id: str
    name: str
    file_size: Optional[int] = None
    views: int = 0
    downloads: int = 0
    created_at: datetime


class ProjectPropertiesResponse(BaseModel):
    project: ProjectDetailResponse
    svg_count: int
    total_views: int
    total_downloads: int
    average_views: int
    average_downloads: int
    conversion_rate: int
    recent_uploads: List[RecentUpload]


class ForkResponse(BaseModel):
    project: ProjectResponse
    svg_count: int
    message: str


class MessageResponse(BaseModel):
    message: str
