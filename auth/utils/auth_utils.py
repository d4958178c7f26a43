from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from core.config_loader import settings


def create_access_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    now_utc: Optional[datetime] = None,
) -> str:
    """
    Create a signed JWT. `now_utc` is only for deterministic tests.
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(timezone.utc)
    expire = current_time + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
