from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..database import get_db
from .. import crud, models, schemas
from ..deps import get_current_user
from ..errors import AuthError, AuthNotConfigured
from ..services import google_oauth
from ..services.accounts import get_or_create_google_user
from ..services.security import (
    SESSION_COOKIE,
    STATE_COOKIE,
    STATE_MAX_AGE_SECONDS,
    create_session_token,
    decode_session_token,
    hash_token,
    new_oauth_state,
)

router = APIRouter(tags=["auth"])


def _cookie_kwargs(settings: Settings) -> dict:
    # frontend and API live on different hosts in production
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none"}
    return {"httponly": True, "secure": False, "samesite": "lax"}


def _frontend_home(settings: Settings) -> str:
    return f"{settings.frontend_url.rstrip('/')}/"


@router.get("/auth/google")
def google_login(settings: Settings = Depends(get_settings)):
    if not settings.oauth_enabled:
        raise AuthNotConfigured()

    state = new_oauth_state()
    resp = RedirectResponse(google_oauth.authorization_url(settings, state), status_code=302)
    resp.set_cookie(STATE_COOKIE, state, max_age=STATE_MAX_AGE_SECONDS, **_cookie_kwargs(settings))
    return resp


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not settings.oauth_enabled:
        raise AuthNotConfigured()

    expected_state = request.cookies.get(STATE_COOKIE)
    if not state or not expected_state or state != expected_state:
        raise AuthError("Invalid OAuth state")
    if not code:
        raise AuthError("Missing authorization code")

    access_token = await google_oauth.exchange_code(settings, code)
    profile = await google_oauth.fetch_profile(access_token)
    user = get_or_create_google_user(db, profile)

    token, jti, expires_at = create_session_token(user.id)
    crud.create_session(
        db,
        user_id=user.id,
        jti=jti,
        token_hash=hash_token(token),
        expires_at=expires_at,
    )

    resp = RedirectResponse(_frontend_home(settings), status_code=302)
    resp.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        **_cookie_kwargs(settings),
    )
    resp.delete_cookie(STATE_COOKIE)
    return resp


@router.get("/api/logout")
def logout(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    token = request.cookies.get(SESSION_COOKIE)
    decoded = decode_session_token(token) if token else None
    if decoded:
        _, jti = decoded
        crud.revoke_session(db, jti, datetime.utcnow())

    resp = RedirectResponse(_frontend_home(settings), status_code=302)
    resp.delete_cookie(SESSION_COOKIE, **_cookie_kwargs(settings))
    return resp


@router.get("/api/current_user", response_model=Optional[schemas.UserOut])
def current_user(user: Optional[models.User] = Depends(get_current_user)):
    return user
