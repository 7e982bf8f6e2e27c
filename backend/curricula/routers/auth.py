"""
Authentication endpoints for admin sessions
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from curricula import exceptions
from curricula.config import settings
from curricula.database import get_db
from curricula.middleware.auth import RequestContext, require_user
from curricula.schemas import LoginRequest, UserResponse
from curricula.services.auth import authenticate_user, create_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=UserResponse)
async def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """
    Sign in with email and password

    Returns:
        The signed-in user; the session token is set as an httpOnly cookie
    """
    try:
        user = authenticate_user(db, request.email, request.password)
    except exceptions.AuthError as e:
        logger.info(f"Failed login for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info(f"User authenticated: {user.email}")
    return user


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(context: RequestContext = Depends(require_user)):
    """
    Get current authenticated user information
    """
    return context.user


@router.post("/logout")
async def logout(response: Response):
    """
    Logout endpoint (clears the session cookie)
    """
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}
