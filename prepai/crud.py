from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError

from . import models


# ----------------- Decks -----------------

def count_decks(db: Session) -> int:
    return db.query(models.Deck).count()


def get_deck(db: Session, deck_id: str) -> Optional[models.Deck]:
    return db.query(models.Deck).filter(models.Deck.id == deck_id).first()


def get_deck_by_topic(db: Session, topic: str) -> Optional[models.Deck]:
    """Case-insensitive exact match on the stored topic."""
    key = models.norm_topic(topic)
    return db.query(models.Deck).filter(models.Deck.topic_norm == key).first()


def list_decks(db: Session) -> List[models.Deck]:
    # newest first
    return (
        db.query(models.Deck)
        .options(selectinload(models.Deck.cards))
        .order_by(models.Deck.created_at.desc())
        .all()
    )


def create_deck(db: Session, *, topic: str, category: str, cards: List[dict]) -> models.Deck:
    deck = models.Deck(
        topic=topic.strip(),
        category=category.strip(),
        progress=0,
        cards=[
            models.Card(
                position=i,
                question=c["question"].strip(),
                answer=c["answer"].strip(),
                difficulty=c["difficulty"].strip().lower(),
            )
            for i, c in enumerate(cards)
        ],
    )
    db.add(deck)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(deck)
    return deck


def update_deck_progress(db: Session, deck_id: str, progress: float) -> Optional[models.Deck]:
    deck = get_deck(db, deck_id)
    if not deck:
        return None
    deck.progress = progress
    db.commit()
    db.refresh(deck)
    return deck


def delete_deck(db: Session, deck: models.Deck) -> None:
    db.delete(deck)
    db.commit()


# ----------------- Users (Auth) -----------------

def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_google_id(db: Session, google_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.google_id == google_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def create_user(
    db: Session,
    *,
    google_id: str,
    display_name: str,
    email: Optional[str],
    photo: Optional[str],
) -> models.User:
    user = models.User(google_id=google_id, display_name=display_name, email=email, photo=photo)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def link_google_account(
    db: Session,
    user: models.User,
    *,
    google_id: str,
    display_name: str,
    photo: Optional[str],
) -> models.User:
    user.google_id = google_id
    user.display_name = user.display_name or display_name
    user.photo = photo or user.photo
    db.commit()
    db.refresh(user)
    return user


# ----------------- Sessions -----------------

def create_session(
    db: Session, *, user_id: str, jti: str, token_hash: str, expires_at: datetime
) -> models.UserSession:
    row = models.UserSession(
        user_id=user_id,
        jti=jti,
        token_hash=token_hash,
        expires_at=expires_at,
    )
    db.add(row)
    db.commit()
    return row


def get_active_session(db: Session, jti: str, now: datetime) -> Optional[models.UserSession]:
    return (
        db.query(models.UserSession)
        .filter(
            models.UserSession.jti == jti,
            models.UserSession.revoked_at.is_(None),
            models.UserSession.expires_at > now,
        )
        .first()
    )


def revoke_session(db: Session, jti: str, now: datetime) -> bool:
    row = (
        db.query(models.UserSession)
        .filter(models.UserSession.jti == jti, models.UserSession.revoked_at.is_(None))
        .first()
    )
    if not row:
        return False
    row.revoked_at = now
    db.commit()
    return True
