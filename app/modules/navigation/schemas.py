from pydantic import BaseModel
from typing import Optional, List


class NavEntry(BaseModel):
    title: str
    url: str
    icon: str


class NavProject(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    count: int
    url: str


class NavigationResponse(BaseModel):
    main: List[NavEntry]
    account: List[NavEntry]
    projects: List[NavProject]
    email: Optional[str] = None
