from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from ..config import Settings
from ..errors import AuthError

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "email", "profile")


@dataclass
class GoogleProfile:
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None


def callback_url(settings: Settings) -> str:
    return f"{settings.backend_url.rstrip('/')}/auth/google/callback"


def authorization_url(settings: Settings, state: str) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": callback_url(settings),
        "response_type": "code",
        "scope": " ".join(SCOPES),
        "state": state,
        "access_type": "online",
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(settings: Settings, code: str) -> str:
    """Trade the authorization code for an access token."""
    data = {
        "code": code,
        "client_id": settings.google_client_id,
        "client_secret": settings.google_client_secret,
        "redirect_uri": callback_url(settings),
        "grant_type": "authorization_code",
    }
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            r = await client.post(TOKEN_URL, data=data)
            r.raise_for_status()
            payload = r.json()
    except httpx.HTTPError as e:
        raise AuthError("Google token exchange failed", details=str(e)) from e

    token = payload.get("access_token")
    if not token:
        raise AuthError("Google token exchange failed", details="no access_token in response")
    return token


async def fetch_profile(access_token: str) -> GoogleProfile:
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            r = await client.get(USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
            r.raise_for_status()
            data = r.json()
    except httpx.HTTPError as e:
        raise AuthError("Failed to load Google profile", details=str(e)) from e

    sub = data.get("sub")
    if not sub:
        raise AuthError("Failed to load Google profile", details="no subject in userinfo")

    return GoogleProfile(
        id=sub,
        display_name=(data.get("name") or "").strip() or None,
        email=(data.get("email") or "").strip() or None,
        photo=data.get("picture") or None,
    )
