from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from studydeck.models.flashcard import Flashcard


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PRESENTING = "presenting"
    REVEALED = "revealed"
    ANSWERING = "answering"
    EMPTY = "empty"  # deck loaded but holds no cards


class SessionCreate(BaseModel):
    material_id: str


class AnswerRequest(BaseModel):
    correct: bool


class StatsView(BaseModel):
    correct: int
    incorrect: int
    total: int
    accuracy: float


class SessionView(BaseModel):
    id: str
    material_id: str
    status: SessionStatus
    card: Flashcard | None
    revealed: bool
    pointer: int
    deck_size: int
    progress: float
    stats: StatsView


class AnswerView(BaseModel):
    card: Flashcard
    interval_days: int
    refreshed: bool
    session: SessionView


class RegenerateView(BaseModel):
    created: int
    session: SessionView
