import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt

from prepai.config import settings

SESSION_COOKIE = "prepai_session"
STATE_COOKIE = "prepai_oauth_state"
STATE_MAX_AGE_SECONDS = 10 * 60


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def new_oauth_state() -> str:
    return secrets.token_urlsafe(24)


def create_session_token(user_id: str, expires_days: Optional[int] = None):
    """
    Returns (token, jti, expires_at). expires_at is naive UTC, as stored in the db.
    """
    days = expires_days if expires_days is not None else settings.session_max_age_days
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=days)
    jti = str(uuid.uuid4())

    payload = {
        "sub": user_id,
        "type": "session",
        "iat": int(now.timestamp()),
        "jti": jti,
        "exp": expire,
    }
    token = jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)
    return token, jti, expire.replace(tzinfo=None)


def decode_session_token(token: str) -> Optional[Tuple[str, str]]:
    """(user_id, jti) for a valid session token, else None."""
    try:
        payload = jwt.decode(
            token, settings.session_secret, algorithms=[settings.session_algorithm]
        )
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    user_id = payload.get("sub")
    jti = payload.get("jti")
    if not user_id or not jti:
        return None
    return user_id, jti
