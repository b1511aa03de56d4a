"""
Supabase Auth with email one-time codes.

- POST /auth/otp     -> auth.sign_in_with_otp() emails a 6-digit code
- POST /auth/verify  -> auth.verify_otp() exchanges the code for a session
- POST /auth/refresh -> auth.refresh_session()
- POST /auth/logout  -> auth.admin.sign_out() revokes the session
- DELETE /auth/account -> profile row + auth identity removal, then sign-out

All user data is stored in Supabase's auth.users table automatically.
"""
from fastapi import APIRouter, Depends, Request
from app.database.supabase_client import get_supabase, get_auth_client, get_admin_client
from app.modules.auth.schemas import (
    OTPRequest, OTPRequestResponse, VerifyOTPRequest, RefreshRequest,
    Identity, SessionResponse, AccountDeletionResponse
)
from app.modules.auth.service import AuthService
from app.core.dependencies import require_session
from app.core.rate_limit import limiter
from app.core.session import SessionContext
from app.config import settings
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    auth_client: Client = Depends(get_auth_client),
    admin_client: Optional[Client] = Depends(get_admin_client),
) -> AuthService:
    return AuthService(supabase, auth_client=auth_client, admin_client=admin_client)


@router.post("/otp", response_model=OTPRequestResponse)
@limiter.limit(settings.otp_rate_limit)
async def request_otp(
    request: Request,
    body: OTPRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a one-time sign-in code to the email address"""
    return service.request_otp(body.email)


@router.post("/verify", response_model=SessionResponse)
@limiter.limit(settings.otp_rate_limit)
async def verify_otp(
    request: Request,
    body: VerifyOTPRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Verify the emailed code and get a session"""
    return service.verify_otp(body.email, body.code)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    body: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.refresh(body.refresh_token)


@router.post("/logout", status_code=200)
async def logout(
    session: SessionContext = Depends(require_session),
    service: AuthService = Depends(get_auth_service)
):
    """Sign out; the local session is cleared even if the backend call fails"""
    service.logout(session.token)
    session.teardown()
    return {"message": "You've been successfully signed out."}


@router.get("/me", response_model=Identity)
async def get_current_user(session: SessionContext = Depends(require_session)):
    """Get current authenticated identity"""
    return session.user


@router.delete("/account", response_model=AccountDeletionResponse)
async def delete_account(
    session: SessionContext = Depends(require_session),
    service: AuthService = Depends(get_auth_service)
):
    """Delete the caller's account"""
    return service.delete_account(session)
