"""
Authentication service for admin sessions.

Passwords are hashed with passlib; a signed JWT carried in an httpOnly cookie
identifies the session.
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from curricula import exceptions
from curricula.config import settings
from curricula.models import User

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT session token for a user

    Args:
        user: Authenticated user
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user.id),
        "role": user.role,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a session token

    Returns:
        Decoded payload, or None if the token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("sub") is None:
        return None
    return payload


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check an email/password pair

    Raises:
        AuthError: If the user does not exist or the password is wrong
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        raise exceptions.AuthError("Invalid email or password")
    return user


def create_user(db: Session, email: str, password: str, name: str, role: str = "user") -> User:
    """
    Create a user account

    Raises:
        ValidationError: If the password is too short
        ConflictError: If the email is already registered
    """
    email = email.strip().lower()
    if len(password) < 8:
        raise exceptions.ValidationError("Password must be at least 8 characters long.")
    if db.query(User).filter(User.email == email).first():
        raise exceptions.ConflictError(f'A user with email "{email}" already exists.')

    user = User(name=name, email=email, password_hash=hash_password(password), role=role)
    try:
        db.add(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == ADMIN_ROLE
