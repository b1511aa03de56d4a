"""
Per-request session context and the route guard.

A SessionContext is created for every request, resolved once from the bearer
token, and then handed to the services that need the caller's identity.

    unresolved --resolve()--> authenticated | anonymous
    authenticated --teardown()--> anonymous
"""

from enum import Enum
from typing import Callable, Optional
from fastapi import HTTPException
from app.modules.auth.schemas import Identity
import logging

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNRESOLVED = "unresolved"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class GuardDecision(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    ALLOW = "allow"


SIGN_IN_ROUTE = "/auth"


class SessionContext:
    def __init__(self, token: Optional[str] = None):
        self.token = token
        self.state = SessionState.UNRESOLVED
        self.user: Optional[Identity] = None

    def resolve(self, lookup: Callable[[str], Identity]) -> "SessionContext":
        """Resolve the identity behind the token. Lookup errors leave the session anonymous."""
        if self.state != SessionState.UNRESOLVED:
            return self
        if not self.token:
            self._become_anonymous()
            return self
        try:
            self.user = lookup(self.token)
            self.state = SessionState.AUTHENTICATED
        except HTTPException as e:
            logger.debug(f"Session token rejected: {e.detail}")
            self._become_anonymous()
        return self

    def teardown(self) -> None:
        self._become_anonymous()
        self.token = None

    def _become_anonymous(self) -> None:
        self.user = None
        self.state = SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.user is not None

    @property
    def user_id(self) -> str:
        if not self.is_authenticated:
            raise HTTPException(status_code=401, detail="Authentication required")
        return self.user.id

    @property
    def email(self) -> Optional[str]:
        return self.user.email if self.user else None


def guard(session: SessionContext) -> GuardDecision:
    """Pure mapping from session state to what the caller is allowed to see."""
    if session.state == SessionState.UNRESOLVED:
        return GuardDecision.LOADING
    if not session.is_authenticated:
        return GuardDecision.REDIRECT
    return GuardDecision.ALLOW
