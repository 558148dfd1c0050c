from __future__ import annotations
from pydantic import BaseModel, ConfigDict, computed_field, field_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Any, Optional, List, Literal

from .utils.time import as_utc, format_long_date


class CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ----------------- CARD SECTION -----------------

class CardOut(CamelModel):
    id: str
    question: str
    answer: str
    difficulty: Literal["easy", "medium", "hard"]


# ----------------- DECK SECTION -----------------

class DeckOut(CamelModel):
    id: str
    topic: str
    category: str
    progress: float
    cards: List[CardOut]
    card_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field(alias="formattedDate")
    @property
    def formatted_date(self) -> str:
        return format_long_date(self.created_at)

    @field_serializer("created_at", "updated_at")
    def _timestamps_as_utc(self, value: Optional[datetime]):
        return as_utc(value) if value is not None else None

    @field_serializer("progress")
    def _progress_as_given(self, value: float):
        # 40.0 -> 40, 40.5 stays
        return int(value) if float(value).is_integer() else value


class GenerateDeckIn(BaseModel):
    # checked by the generation service (400 InvalidInput)
    topic: Any = None


class ProgressIn(BaseModel):
    progress: Any = None


class DeckResultOut(BaseModel):
    success: bool = True
    source: Optional[Literal["cache", "ai"]] = None
    message: Optional[str] = None
    data: DeckOut


class DeckListOut(BaseModel):
    success: bool = True
    count: int
    data: List[DeckOut]


# ----------------- STATS -----------------

class CategoryCountOut(CamelModel):
    category: str
    count: int


class DeckStatsOut(CamelModel):
    total_decks: int
    completed_decks: int
    total_cards: int
    average_progress: int
    categories: List[CategoryCountOut]


class DeckStatsResultOut(BaseModel):
    success: bool = True
    data: DeckStatsOut


# ----------------- SYSTEM -----------------

class HealthOut(BaseModel):
    success: bool = True
    message: str
    timestamp: str


class ErrorOut(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None


# ----------------- USER SECTION -----------------

class UserOut(CamelModel):
    id: str
    google_id: Optional[str] = None
    display_name: str
    email: Optional[str] = None
    photo: Optional[str] = None
