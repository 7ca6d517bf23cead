from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Flashcard(BaseModel):
    id: str
    material_id: str
    front: str
    back: str
    difficulty: Difficulty  # informational; the scheduler never reads it
    correct_streak: int = Field(ge=0)
    review_count: int = Field(ge=0)
    next_review: date

    def is_due(self, today: date) -> bool:
        return self.next_review <= today


class CardDraft(BaseModel):
    """Card content as emitted by a generator, before the store assigns an id."""

    model_config = {"extra": "ignore"}

    front: str
    back: str
    difficulty: Difficulty = Difficulty.MEDIUM

    @field_validator("front", "back", mode="before")
    @classmethod
    def _strip(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, value: object) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        try:
            return Difficulty(str(value).strip().lower())
        except ValueError:
            return Difficulty.MEDIUM


class ReviewUpdate(BaseModel):
    """The only fields a review is allowed to change on a card."""

    correct_streak: int = Field(ge=0)
    review_count: int = Field(ge=0)
    next_review: date


class FlashcardList(BaseModel):
    items: list[Flashcard]
    total: int


class MaterialDeckStats(BaseModel):
    material_id: str
    title: str
    total: int
    due: int


class DeckStats(BaseModel):
    total_cards: int
    due_today: int
    per_material: list[MaterialDeckStats]
