from studydeck.models.flashcard import (
    CardDraft,
    DeckStats,
    Difficulty,
    Flashcard,
    FlashcardList,
    MaterialDeckStats,
    ReviewUpdate,
)
from studydeck.models.material import (
    StudyMaterial,
    StudyMaterialCreate,
    StudyMaterialList,
    StudyMaterialUpdate,
)
from studydeck.models.session import (
    AnswerRequest,
    AnswerView,
    RegenerateView,
    SessionCreate,
    SessionStatus,
    SessionView,
    StatsView,
)

__all__ = [
    "AnswerRequest",
    "AnswerView",
    "CardDraft",
    "DeckStats",
    "Difficulty",
    "Flashcard",
    "FlashcardList",
    "MaterialDeckStats",
    "RegenerateView",
    "ReviewUpdate",
    "SessionCreate",
    "SessionStatus",
    "SessionView",
    "StatsView",
    "StudyMaterial",
    "StudyMaterialCreate",
    "StudyMaterialList",
    "StudyMaterialUpdate",
]
