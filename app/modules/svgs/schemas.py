from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from app.core.formatting import normalize_tags


class SVGUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    project_id: Optional[str] = None
    tags: Optional[Union[List[str], str]] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, value):
        if value is None or not str(value).strip():
            raise ValueError("SVG name is required")
        return value

    @field_validator("tags")
    @classmethod
    def split_tags(cls, value):
        return normalize_tags(value)


class SVGResponse(BaseModel):
    id: str
    user_id: str
    project_id: str
    name: str
    description: Optional[str] = None
    file_path: str
    file_size: Optional[int] = None
    tags: Optional[List[str]] = None
    views: int = 0
    downloads: int = 0
    favorited: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class SVGProjectSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_public: bool = False
    user_id: str
    owner_display_name: str


class SVGPreviewResponse(SVGResponse):
    project: Optional[SVGProjectSummary] = None
    owner_display_name: str
    is_owner: bool


class FavoriteResponse(BaseModel):
    svg_id: str
    favorited: bool
    message: str


class SVGContentResponse(BaseModel):
    svg_id: str
    markup: str
    sanitized: bool = True
