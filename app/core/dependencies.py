"""
Core dependencies for session resolution, the route guard and row ownership checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.projects.models import PROJECTS_TABLE
from app.modules.svgs.models import SVGS_TABLE
from app.core.session import SessionContext, GuardDecision, guard, SIGN_IN_ROUTE
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionContext:
    """Build and resolve the per-request session from the bearer token (if any)"""
    token = credentials.credentials if credentials else None
    return SessionContext(token).resolve(auth_service.get_current_user)


def require_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Route guard: only authenticated sessions reach the application routes"""
    decision = guard(session)
    if decision == GuardDecision.LOADING:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session is still resolving",
            headers={"Retry-After": "1"}
        )
    if decision == GuardDecision.REDIRECT:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer", "Location": SIGN_IN_ROUTE}
        )
    return session


def _fetch_row(supabase: Client, table: str, row_id: str, columns: str = "*") -> Optional[Dict[str, Any]]:
    try:
        result = supabase.table(table)\
            .select(columns)\
            .eq("id", row_id)\
            .maybe_single()\
            .execute()
    except Exception as e:
        # malformed ids are rejected by PostgREST; treat them as missing rows
        logger.warning(f"Lookup of {table}/{row_id} failed: {e}")
        return None
    if result is None or not result.data:
        return None
    return result.data


def get_project_row(project_id: str, supabase: Client) -> Dict[str, Any]:
    project = _fetch_row(supabase, PROJECTS_TABLE, project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def get_svg_row(svg_id: str, supabase: Client) -> Dict[str, Any]:
    svg = _fetch_row(supabase, SVGS_TABLE, svg_id)
    if not svg:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SVG not found")
    return svg


def check_project_owner(project_id: str, session: SessionContext, supabase: Client, project: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the project row if the caller owns it"""
    project = project or get_project_row(project_id, supabase)
    if project.get("user_id") != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the project owner can perform this action"
        )
    return project


def check_project_readable(project_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    """Owner, or anyone when the project is public. Private projects of others look missing."""
    project = get_project_row(project_id, supabase)
    if project.get("user_id") == session.user_id or project.get("is_public"):
        return project
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")


def check_svg_owner(svg_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    svg = get_svg_row(svg_id, supabase)
    if svg.get("user_id") != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the SVG owner can perform this action"
        )
    return svg


def check_svg_readable(svg_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    """Owner, or anyone when the SVG's project is public"""
    svg = get_svg_row(svg_id, supabase)
    if svg.get("user_id") == session.user_id:
        return svg
    project = _fetch_row(supabase, PROJECTS_TABLE, svg.get("project_id"), "id, is_public")
    if project and project.get("is_public"):
        return svg
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SVG not found")
