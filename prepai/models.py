from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates

from .database import Base


def new_id() -> str:
    return uuid4().hex


def norm_topic(topic: str) -> str:
    return (topic or "").strip().lower()


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    google_id = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=True)
    photo = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


class UserSession(Base):
    """
    Server-side record of a login session. The cookie only carries a signed
    token pointing at a row here; revoking the row ends the session.
    """

    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # jti is inside the session JWT; unique per login
    jti = Column(String(36), nullable=False, unique=True, index=True)

    # store only hash of the session token (never store raw token)
    token_hash = Column(String(64), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="sessions")


Index("ix_user_sessions_user_revoked", UserSession.user_id, UserSession.revoked_at)


class Deck(Base):
    """
    Global pool of generated decks (not scoped to a user).
    """

    __tablename__ = "decks"

    id = Column(String(32), primary_key=True, default=new_id)
    topic = Column(String(100), nullable=False)
    # lowercased topic, the case-insensitive uniqueness key
    topic_norm = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(String, default="General", nullable=False)
    progress = Column(Float, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    cards = relationship(
        "Card",
        back_populates="deck",
        cascade="all, delete-orphan",
        order_by="Card.position",
    )

    @validates("topic")
    def _sync_topic_norm(self, key, value):
        self.topic_norm = norm_topic(value)
        return value

    @validates("created_at")
    def _created_at_is_immutable(self, key, value):
        if self.created_at is not None and value != self.created_at:
            raise ValueError("createdAt cannot be changed")
        return value

    @property
    def card_count(self) -> int:
        return len(self.cards)


class Card(Base):
    __tablename__ = "cards"

    id = Column(String(32), primary_key=True, default=new_id)
    deck_id = Column(
        String(32), ForeignKey("decks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    question = Column(String, nullable=False)
    answer = Column(Text, nullable=False)
    difficulty = Column(String(10), nullable=False)  # easy | medium | hard

    deck = relationship("Deck", back_populates="cards")
