"""
Access-token verification for the hosted auth service.

The auth service signs HS256 JWTs with the project secret. We only verify
them; sign-up, login and password changes never touch this backend.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import JWTError, jwt

from app.core.config import settings

ALGORITHM = "HS256"


def decode_access_token(token: str) -> Optional[Dict]:
    """Return the token claims, or None if the token is invalid or expired."""
    options = {"verify_aud": settings.auth_jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.auth_jwt_audience,
            options=options,
        )
    except JWTError:
        return None


def create_access_token(
    user_id: str,
    display_name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Mint a token shaped like the auth service's (seed scripts and tests)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims: Dict = {"sub": user_id, "exp": expire}
    if settings.auth_jwt_audience is not None:
        claims["aud"] = settings.auth_jwt_audience
    if display_name:
        claims["user_metadata"] = {"display_name": display_name}
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=ALGORITHM)
