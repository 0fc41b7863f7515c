"""Supabase Auth token verification and caller resolution.

Supabase issues the access tokens; this service only verifies them with the
project's JWT secret and maps the ``sub`` claim onto a ``profiles`` row.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..models.profile import Profile
from .config import settings
from .database import get_db
from .request_context import set_auth_user_id

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, email: str = "", expires_delta: Optional[timedelta] = None) -> str:
    """Mint a Supabase-shaped access token (local development and tests)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims = {
        "sub": user_id,
        "email": email,
        "aud": settings.SUPABASE_JWT_AUDIENCE,
        "role": "authenticated",
        "exp": expire,
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def get_token_subject(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No authorization header")
    payload = decode_token(credentials.credentials)
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    set_auth_user_id(subject)
    return subject


def get_current_profile(
    user_id: str = Depends(get_token_subject),
    db: Session = Depends(get_db),
) -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile not found")
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if not profile.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return profile
