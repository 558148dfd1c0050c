from sqlalchemy.orm import Session

from .. import crud, models
from ..utils.logging import get_logger
from .google_oauth import GoogleProfile

logger = get_logger(__name__)


def display_name_for(profile: GoogleProfile) -> str:
    if profile.display_name:
        return profile.display_name
    if profile.email:
        return profile.email.split("@")[0]
    return "User"


def get_or_create_google_user(db: Session, profile: GoogleProfile) -> models.User:
    """
    1) known Google id -> that user
    2) known email -> link the Google id to it
    3) otherwise create a new user
    """
    user = crud.get_user_by_google_id(db, profile.id)
    if user:
        return user

    if profile.email:
        user = crud.get_user_by_email(db, profile.email)
        if user:
            logger.info("Linking Google account to existing user %s", user.id)
            return crud.link_google_account(
                db,
                user,
                google_id=profile.id,
                display_name=display_name_for(profile),
                photo=profile.photo,
            )

    user = crud.create_user(
        db,
        google_id=profile.id,
        display_name=display_name_for(profile),
        email=profile.email,
        photo=profile.photo,
    )
    logger.info("Created user %s from Google login", user.id)
    return user
