from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, models
from ..config import settings
from ..errors import (
    AIResponseInvalid,
    AIResponseMalformed,
    CapacityExceeded,
    InvalidInput,
    ValidationError,
)
from ..utils.logging import get_logger
from .validation import is_valid_difficulty, validate_deck

logger = get_logger(__name__)

DEFAULT_CATEGORY = "General"

_FENCE_RE = re.compile(r"```(?:json)?\n?", re.IGNORECASE)


class TextCompletion(Protocol):
    async def complete(self, prompt: str) -> str: ...


@dataclass
class GenerationResult:
    deck: models.Deck
    source: str  # "cache" | "ai"


# ==============================
# Prompt + response handling
# ==============================


def build_prompt(topic: str, card_count: int = 10) -> str:
    return f"""You are an expert educational AI.

User Topic: "{topic}"

Task: Generate exactly {card_count} flashcards strictly focused on ACRONYMS and ABBREVIATIONS related to the topic.

Requirements:
1.  **Summarize Topic**: Create a short, concise title for the deck (e.g., "Computer Networks" instead of "history of computer networks...").
2.  **Categorize**: Assign a broad category (e.g., "Tech", "Science", "Medical", "Business", "General").
3.  **Flashcards**: Generate {card_count} cards.
    *   **Question**: The Acronym (e.g., "CPU").
    *   **Answer**: The Full Form + Brief definition (e.g., "Central Processing Unit - The brain of the computer").
    *   **Difficulty**: "easy", "medium", or "hard".

Output Format: Return ONLY a valid JSON object (no markdown):
{{
  "topic": "Summarized Topic Name",
  "category": "Category Name",
  "cards": [
    {{ "question": "CPU", "answer": "Central Processing Unit...", "difficulty": "easy" }}
  ]
}}"""


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_ai_response(raw: str) -> Any:
    cleaned = strip_code_fences(raw)
    try:
        return json.loads(cleaned)
    except ValueError as e:
        raise AIResponseMalformed(details=cleaned) from e


def extract_cards(payload: Any) -> List[dict]:
    """Return the card list if the parsed payload has the expected shape."""
    if not isinstance(payload, dict):
        raise AIResponseInvalid()

    cards = payload.get("cards")
    if not isinstance(cards, list) or not cards:
        raise AIResponseInvalid()

    for card in cards:
        if not (
            isinstance(card, dict)
            and _non_empty_str(card.get("question"))
            and _non_empty_str(card.get("answer"))
            and is_valid_difficulty(card.get("difficulty"))
        ):
            raise AIResponseInvalid("AI returned cards with missing or invalid fields")

    return cards


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _pick(value: Any, fallback: str) -> str:
    return value.strip() if _non_empty_str(value) else fallback


# ==============================
# Generation flow
# ==============================


def normalize_topic(topic_raw: Any) -> str:
    if not isinstance(topic_raw, str) or not topic_raw.strip():
        raise InvalidInput("Topic is required and must be a non-empty string")
    return topic_raw.strip()


def find_cached_or_check_capacity(db: Session, topic: str, max_decks: int):
    """
    Existing deck for the topic, or None when a new one may be created.

    Raises CapacityExceeded when the pool is full and the topic is new.
    """
    deck_count = crud.count_decks(db)
    existing = crud.get_deck_by_topic(db, topic)
    if deck_count >= max_decks and existing is None:
        raise CapacityExceeded(
            f"Deck limit reached ({max_decks}). Please delete some decks to create new ones."
        )
    return existing


def save_generated_deck(db: Session, *, topic: str, category: str, cards: List[dict]) -> models.Deck:
    violations = validate_deck(topic, category, 0, cards)
    if violations:
        raise ValidationError(details=[str(v) for v in violations])

    try:
        return crud.create_deck(db, topic=topic, category=category, cards=cards)
    except IntegrityError as e:
        raise ValidationError(details=[f"topic: A deck named '{topic}' already exists"]) from e


async def generate(db: Session, ai_client: TextCompletion, topic_raw: Any) -> GenerationResult:
    topic = normalize_topic(topic_raw)

    existing = find_cached_or_check_capacity(db, topic, settings.max_decks)
    if existing is not None:
        logger.info("Deck cache hit for topic %r (deck %s)", topic, existing.id)
        return GenerationResult(deck=existing, source="cache")

    logger.info("Generating deck for topic %r", topic)
    raw = await ai_client.complete(build_prompt(topic, settings.cards_per_deck))

    try:
        payload = parse_ai_response(raw)
        cards = extract_cards(payload)
    except (AIResponseMalformed, AIResponseInvalid) as e:
        logger.warning("Rejected AI output for topic %r: %s", topic, e.message)
        raise

    deck = save_generated_deck(
        db,
        topic=_pick(payload.get("topic"), topic),
        category=_pick(payload.get("category"), DEFAULT_CATEGORY),
        cards=cards,
    )
    logger.info("Created deck %s (%r, %d cards)", deck.id, deck.topic, len(deck.cards))
    return GenerationResult(deck=deck, source="ai")
