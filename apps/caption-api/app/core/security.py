"""
Security utilities:
- JWT creation and validation

Sessions are issued by the external identity provider; this service only
verifies the bearer token it is handed. `create_access_token` mints a
compatible token for local development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from jose import jwt

from app.core.config import settings


def create_access_token(
    data: Dict[str, Any], expires_minutes: Optional[int] = None
) -> str:
    """
    Create a signed JWT.
    `data` should include minimally: {"sub": user_id}.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    if settings.JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(
        to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate JWT, raising JWTError on failure."""
    options = {"verify_aud": bool(settings.JWT_AUDIENCE)}
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options=options,
    )
