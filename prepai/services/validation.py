from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List

DIFFICULTIES = ("easy", "medium", "hard")

TOPIC_MIN_LEN = 2
TOPIC_MAX_LEN = 100
QUESTION_MIN_LEN = 3
ANSWER_MIN_LEN = 1


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def is_valid_progress(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a progress value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # range first: huge ints overflow float conversion, NaN fails any comparison
    if not 0 <= value <= 100:
        return False
    return math.isfinite(value)


def is_valid_difficulty(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() in DIFFICULTIES


def validate_card(card: Any, index: int) -> List[Violation]:
    prefix = f"cards.{index}"
    if not isinstance(card, dict):
        return [Violation(prefix, "Card must be an object")]

    violations: List[Violation] = []

    question = card.get("question")
    if not isinstance(question, str) or not question.strip():
        violations.append(Violation(f"{prefix}.question", "Question is required"))
    elif len(question.strip()) < QUESTION_MIN_LEN:
        violations.append(
            Violation(
                f"{prefix}.question",
                f"Question must be at least {QUESTION_MIN_LEN} characters long",
            )
        )

    answer = card.get("answer")
    if not isinstance(answer, str) or len(answer.strip()) < ANSWER_MIN_LEN:
        violations.append(Violation(f"{prefix}.answer", "Answer cannot be empty"))

    if card.get("difficulty") is None:
        violations.append(Violation(f"{prefix}.difficulty", "Difficulty is required"))
    elif not is_valid_difficulty(card.get("difficulty")):
        violations.append(
            Violation(f"{prefix}.difficulty", "Difficulty must be easy, medium, or hard")
        )

    return violations


def validate_deck(topic: Any, category: Any, progress: Any, cards: Any) -> List[Violation]:
    """
    Check a deck against the record rules before it is persisted.

    Returns every violation found (empty list when the deck is valid);
    never raises.
    """
    violations: List[Violation] = []

    if not isinstance(topic, str) or not topic.strip():
        violations.append(Violation("topic", "Topic is required"))
    else:
        length = len(topic.strip())
        if length < TOPIC_MIN_LEN:
            violations.append(
                Violation("topic", f"Topic must be at least {TOPIC_MIN_LEN} characters long")
            )
        elif length > TOPIC_MAX_LEN:
            violations.append(
                Violation("topic", f"Topic cannot exceed {TOPIC_MAX_LEN} characters")
            )

    if not isinstance(category, str):
        violations.append(Violation("category", "Category must be a string"))

    if not is_valid_progress(progress):
        violations.append(Violation("progress", "Progress must be a number between 0 and 100"))

    if not isinstance(cards, list):
        violations.append(Violation("cards", "Cards array is required"))
    elif not cards:
        violations.append(Violation("cards", "Deck must contain at least one card"))
    else:
        for i, card in enumerate(cards):
            violations.extend(validate_card(card, i))

    return violations
