from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectListItem,
    ProjectDetailResponse, ProjectSvgListResponse, ProjectPropertiesResponse,
    ForkResponse, MessageResponse, ProjectSort, ProjectSvgSort
)
from app.modules.projects.service import ProjectService
from app.core.dependencies import require_session
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(
    supabase: Client = Depends(get_supabase),
    session: SessionContext = Depends(require_session),
) -> ProjectService:
    return ProjectService(supabase, session)


@router.get("", response_model=List[ProjectListItem])
async def list_projects(
    sort: ProjectSort = ProjectSort.RECENT,
    service: ProjectService = Depends(get_project_service)
):
    """List the caller's projects"""
    return service.list_projects(sort)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends(get_project_service)
):
    return service.create_project(project_data)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return service.get_project(project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    service: ProjectService = Depends(get_project_service)
):
    """Update name, description, colour or visibility (owner only)"""
    return service.update_project(project_id, project_data)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Delete a project and all of its SVGs (owner only)"""
    return service.delete_project(project_id)


@router.get("/{project_id}/svgs", response_model=ProjectSvgListResponse)
async def list_project_svgs(
    project_id: str,
    q: Optional[str] = None,
    sort: ProjectSvgSort = ProjectSvgSort.DATE,
    service: ProjectService = Depends(get_project_service)
):
    return service.list_project_svgs(project_id, q=q, sort=sort)


@router.get("/{project_id}/properties", response_model=ProjectPropertiesResponse)
async def get_project_properties(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Usage totals, averages and recent uploads"""
    return service.get_properties(project_id)


@router.post("/{project_id}/fork", response_model=ForkResponse, status_code=201)
async def fork_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Copy a public project into the caller's account"""
    return service.fork_project(project_id)
