from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from community_events.core.clock import Clock, DateClock, SystemClock
from community_events.core.config import settings
from community_events.core.security import decode_token
from community_events.db.session import get_db
from community_events.models.profile import Profile

# Tokens come from the hosted auth platform; there is no login route here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/v1/token", auto_error=False)


def get_clock() -> Clock:
    if settings.REFERENCE_DATE:
        return DateClock(settings.REFERENCE_DATE)
    return SystemClock()


def get_current_profile(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_error
    user_id = decode_token(token)
    if not user_id:
        raise credentials_error
    try:
        key = UUID(user_id)
    except ValueError:
        raise credentials_error
    profile = db.get(Profile, key)
    if profile is None:
        raise credentials_error
    return profile


def get_current_admin_user(profile: Profile = Depends(get_current_profile)) -> Profile:
    if not profile.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return profile
