"""
Request authentication: the admin session context and the agent intake token
"""
import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from curricula.config import settings
from curricula.database import get_db
from curricula.models import User
from curricula.services.auth import decode_session_token, is_admin


@dataclass(frozen=True)
class RequestContext:
    """Per-request view of who is calling, resolved once from the session cookie."""
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.user)


def get_request_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    """
    Dependency resolving the session cookie into a RequestContext

    Missing, invalid or expired sessions yield an anonymous context.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return RequestContext()

    payload = decode_session_token(token)
    if payload is None:
        return RequestContext()

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return RequestContext()

    return RequestContext(user=db.get(User, user_id))


def require_user(context: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not context.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return context


def require_admin(context: RequestContext = Depends(require_user)) -> RequestContext:
    """
    Dependency for admin-only routes

    Raises:
        HTTPException: 401 without a session, 403 for non-admin users
    """
    if not context.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return context


def check_submission_token(authorization: Optional[str]) -> Optional[str]:
    """
    Validate the bearer token sent by submitting agents

    Returns:
        None when the token is valid, otherwise the error message for a 401
    """
    if not authorization or not authorization.startswith("Bearer "):
        return "Missing or invalid authorization header"

    token = authorization[len("Bearer "):]
    expected = settings.SUBMISSION_API_TOKEN
    if not expected or not secrets.compare_digest(token.encode(), expected.encode()):
        return "Invalid token"
    return None
