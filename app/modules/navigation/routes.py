from fastapi import APIRouter, Depends
from app.modules.navigation.schemas import NavigationResponse
from app.modules.navigation.service import NavigationService
from app.modules.projects.routes import get_project_service
from app.modules.projects.service import ProjectService

router = APIRouter(prefix="/navigation", tags=["navigation"])


def get_navigation_service(project_service: ProjectService = Depends(get_project_service)) -> NavigationService:
    return NavigationService(project_service)


@router.get("", response_model=NavigationResponse)
async def get_navigation(service: NavigationService = Depends(get_navigation_service)):
    """Application shell navigation"""
    return service.get_navigation()
