import hashlib
import time
import logging
from supabase import Client
from app.modules.auth.schemas import (
    Identity, OTPRequestResponse, SessionResponse, AccountDeletionResponse
)
from app.modules.profiles.models import PROFILES_TABLE
from app.core.query_cache import query_cache
from fastapi import HTTPException
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def identity_from_user(user: Any) -> Identity:
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None),
        email_confirmed_at=getattr(user, "email_confirmed_at", None),
        created_at=getattr(user, "created_at", None),
        last_sign_in_at=getattr(user, "last_sign_in_at", None),
    )


class AuthService:
    def __init__(self, supabase: Client, auth_client: Optional[Client] = None, admin_client: Optional[Client] = None):
        self.supabase = supabase
        # OTP challenge/verify run on a non-persisting client so no session leaks into the shared one
        self.auth_client = auth_client or supabase
        self.admin_client = admin_client

    def request_otp(self, email: str) -> OTPRequestResponse:
        """Ask Supabase Auth to email a one-time code. Does not create a session."""
        try:
            self.auth_client.auth.sign_in_with_otp({
                "email": email,
                "options": {
                    "should_create_user": True
                }
            })
        except Exception as e:
            logger.info(f"OTP request rejected for {email}: {e}")
            raise HTTPException(status_code=400, detail=_error_message(e))
        return OTPRequestResponse(
            email=email,
            message="We've sent you a 6-digit verification code."
        )

    def verify_otp(self, email: str, code: str) -> SessionResponse:
        """Exchange an emailed code for a session"""
        try:
            auth_response = self.auth_client.auth.verify_otp({
                "email": email,
                "token": code,
                "type": "email"
            })
        except Exception as e:
            raise HTTPException(status_code=401, detail=_error_message(e))

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid or expired verification code")
        return self._session_response(auth_response)

    def refresh(self, refresh_token: str) -> SessionResponse:
        try:
            auth_response = self.auth_client.auth.refresh_session(refresh_token)
        except Exception as e:
            raise HTTPException(status_code=401, detail=_error_message(e))
        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid refresh token")
        return self._session_response(auth_response)

    def get_current_user(self, token: str) -> Identity:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                identity, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return identity
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            identity = identity_from_user(user_response.user)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (identity, now + _AUTH_CACHE_TTL_SEC)
            return identity
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: Optional[str]) -> bool:
        """Revoke the session at Supabase (best effort) and always drop the cached identity."""
        if not token:
            return False
        _AUTH_USER_CACHE.pop(_cache_key(token), None)
        try:
            self.auth_client.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Backend sign-out failed, local session cleared anyway: {e}")
            return False

    def delete_account(self, session) -> AccountDeletionResponse:
        """Delete the profile row, then the auth identity when the admin API is available, then sign out."""
        user_id = session.user_id
        try:
            self.supabase.table(PROFILES_TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting profile for {user_id}: {e}")

        identity_deleted = False
        if self.admin_client is not None:
            try:
                self.admin_client.auth.admin.delete_user(user_id)
                identity_deleted = True
            except Exception as e:
                logger.error(f"Error deleting auth user {user_id}: {e}")
        else:
            logger.warning("Service role key not configured; auth user %s left for manual deletion", user_id)

        self.logout(session.token)
        session.teardown()
        query_cache.apply_mutation("account.delete")

        if identity_deleted:
            return AccountDeletionResponse(
                status="deleted",
                message="Your account has been permanently deleted."
            )
        return AccountDeletionResponse(
            status="scheduled",
            message="Your account will be permanently deleted. Please contact support to complete the process."
        )

    def _session_response(self, auth_response) -> SessionResponse:
        session = auth_response.session
        return SessionResponse(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            token_type=getattr(session, "token_type", None) or "bearer",
            expires_in=getattr(session, "expires_in", None),
            user=identity_from_user(auth_response.user),
        )
