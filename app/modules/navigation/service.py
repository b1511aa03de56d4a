from app.modules.navigation.schemas import NavEntry, NavProject, NavigationResponse
from app.modules.projects.schemas import ProjectSort
from app.modules.projects.service import ProjectService

MAIN_ENTRIES = (
    NavEntry(title="Dashboard", url="/", icon="home"),
    NavEntry(title="Search", url="/search", icon="search"),
    NavEntry(title="Explore", url="/explore", icon="trending-up"),
    NavEntry(title="Upload", url="/upload", icon="upload"),
    NavEntry(title="Analytics", url="/analytics", icon="bar-chart"),
)

ACCOUNT_ENTRIES = (
    NavEntry(title="Profile", url="/profile", icon="user"),
    NavEntry(title="Settings", url="/settings", icon="settings"),
)


class NavigationService:
    def __init__(self, project_service: ProjectService):
        self.project_service = project_service

    def get_navigation(self) -> NavigationResponse:
        """Sidebar: static entries plus the caller's projects, newest first"""
        projects = self.project_service.list_projects(ProjectSort.RECENT)
        return NavigationResponse(
            main=list(MAIN_ENTRIES),
            account=list(ACCOUNT_ENTRIES),
            projects=[NavProject(
                id=p.id,
                name=p.name,
                color=p.color,
                count=p.svg_count,
                url=f"/project/{p.id}",
            ) for p in projects],
            email=self.project_service.session.email,
        )
