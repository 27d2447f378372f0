"""
Authentication dependencies.

The hosted auth service owns sign-up, login and passwords. Requests carry
its access token; we verify it and map the subject to a local profile,
creating the profile the first time a user shows up.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_DISPLAY_NAME, DEFAULT_GOAL_MILES
from app.core.security import decode_access_token
from app.db import get_db
from app.models.profile import Profile

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not a 403
security = HTTPBearer(auto_error=False)


def _display_name_from(claims: dict) -> str:
    meta = claims.get("user_metadata") or {}
    name = (meta.get("display_name") or "").strip()
    return name or DEFAULT_DISPLAY_NAME


def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_access_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        logger.warning("rejected invalid access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = str(claims["sub"])
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile is None:
        profile = Profile(
            id=user_id,
            display_name=_display_name_from(claims),
            personal_goal_miles=DEFAULT_GOAL_MILES,
            is_admin=False,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        logger.info("created profile for %s", user_id)
    return profile
