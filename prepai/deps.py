from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from . import crud, models
from .services.ai_client import GeminiClient
from .services.security import SESSION_COOKIE, decode_session_token, hash_token


@lru_cache
def get_ai_client() -> GeminiClient:
    """One client (and connection pool) per process; closed in the app lifespan."""
    return GeminiClient.from_settings(get_settings())


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[models.User]:
    """
    Session-bound user, or None. The session cookie must decode and point at
    an unrevoked, unexpired session row holding the same token hash.
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None

    decoded = decode_session_token(token)
    if not decoded:
        return None
    user_id, jti = decoded

    session = crud.get_active_session(db, jti, datetime.utcnow())
    if not session or session.user_id != user_id or session.token_hash != hash_token(token):
        return None

    return crud.get_user(db, user_id)
