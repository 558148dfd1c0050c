import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# IMPORTANT: ensure models are imported so Base.metadata is populated
from prepai import crud, models  # noqa: F401
from prepai.main import app
from prepai.database import Base, get_db
from prepai.deps import get_ai_client

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeAIClient:
    """Stands in for GeminiClient; replies with queued texts and records prompts."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.prompts = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("AI client should NOT be called here")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_cards(n: int = 10, difficulty=None) -> list:
    return [
        {
            "question": f"AC{i:02d}",
            "answer": f"Acronym Number {i} - a brief definition",
            "difficulty": ("easy", "medium", "hard")[i % 3] if difficulty is None else difficulty,
        }
        for i in range(n)
    ]


def ai_reply(topic="Computer Networks", category="Tech", cards=None, fenced=False) -> str:
    payload = {"topic": topic, "category": category, "cards": make_cards(10) if cards is None else cards}
    text = json.dumps(payload)
    if fenced:
        return f"```json\n{text}\n```"
    return text


def seed_deck(db, topic: str, category: str = "General", n_cards: int = 3, progress=None):
    deck = crud.create_deck(db, topic=topic, category=category, cards=make_cards(n_cards))
    if progress is not None:
        deck = crud.update_deck_progress(db, deck.id, progress)
    return deck


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def ai():
    return FakeAIClient()


@pytest.fixture()
def client(db, ai):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai
    yield TestClient(app)
    app.dependency_overrides.clear()


def deck_count(db) -> int:
    return db.query(models.Deck).count()
