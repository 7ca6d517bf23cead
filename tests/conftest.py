import os
import uuid
from datetime import date

import pytest
import pytest_asyncio

# Set test environment variables
os.environ.setdefault("STUDYDECK_LOG_LEVEL", "WARNING")

from studydeck.db.sqlite import init_sqlite  # noqa: E402
from studydeck.errors import (  # noqa: E402
    CardNotFoundError,
    GenerationError,
    StoreError,
)
from studydeck.models.flashcard import (  # noqa: E402
    CardDraft,
    Difficulty,
    Flashcard,
    ReviewUpdate,
)
from studydeck.models.material import StudyMaterial  # noqa: E402

TODAY = date(2024, 3, 10)


class FixedClock:
    def __init__(self, today: date = TODAY) -> None:
        self.current = today

    def today(self) -> date:
        return self.current


class FakeCardStore:
    """In-memory CardStore with switchable failures."""

    def __init__(self) -> None:
        self.cards: dict[str, Flashcard] = {}
        self.materials: dict[str, StudyMaterial] = {}
        self.fail_list = False
        self.fail_update = False
        self.fail_create = False
        self.update_calls: list[tuple[str, ReviewUpdate]] = []

    def add_material(self, material_id: str = "mat-1", content: str = "Photosynthesis") -> StudyMaterial:
        material = StudyMaterial(
            id=material_id,
            title="Biology 101",
            subject="biology",
            extracted_content=content,
            created_at="2024-03-01 00:00:00",
            updated_at="2024-03-01 00:00:00",
        )
        self.materials[material_id] = material
        return material

    def add_card(
        self,
        material_id: str = "mat-1",
        next_review: date = TODAY,
        correct_streak: int = 0,
        review_count: int = 0,
        front: str | None = None,
    ) -> Flashcard:
        card_id = f"card-{len(self.cards) + 1}"
        card = Flashcard(
            id=card_id,
            material_id=material_id,
            front=front or f"Question {card_id}",
            back=f"Answer {card_id}",
            difficulty=Difficulty.MEDIUM,
            correct_streak=correct_streak,
            review_count=review_count,
            next_review=next_review,
        )
        self.cards[card_id] = card
        return card

    async def list_cards(self, material_id: str) -> list[Flashcard]:
        if self.fail_list:
            raise StoreError("list failed")
        return [c for c in self.cards.values() if c.material_id == material_id]

    async def create_card(
        self, material_id: str, draft: CardDraft, next_review: date
    ) -> Flashcard:
        card = Flashcard(
            id=str(uuid.uuid4()),
            material_id=material_id,
            front=draft.front,
            back=draft.back,
            difficulty=draft.difficulty,
            correct_streak=0,
            review_count=0,
            next_review=next_review,
        )
        self.cards[card.id] = card
        return card

    async def create_cards(
        self, material_id: str, drafts: list[CardDraft], next_review: date
    ) -> list[Flashcard]:
        if self.fail_create:
            raise StoreError("create failed")
        return [await self.create_card(material_id, d, next_review) for d in drafts]

    async def update_card(self, card_id: str, update: ReviewUpdate) -> Flashcard:
        self.update_calls.append((card_id, update))
        if self.fail_update:
            raise StoreError("update failed")
        if card_id not in self.cards:
            raise CardNotFoundError(card_id)
        card = self.cards[card_id].model_copy(update=update.model_dump())
        self.cards[card_id] = card
        return card

    async def get_material(self, material_id: str) -> StudyMaterial | None:
        return self.materials.get(material_id)


class FakeGenerator:
    def __init__(self, count: int = 3, error: Exception | None = None) -> None:
        self.count = count
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    async def generate_cards(
        self, material_content: str, subject: str, title: str
    ) -> list[CardDraft]:
        self.calls.append((material_content, subject, title))
        if self.error is not None:
            raise self.error
        return [
            CardDraft(front=f"Generated Q{i}", back=f"Generated A{i}", difficulty="easy")
            for i in range(self.count)
        ]


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return FakeCardStore()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def failing_generator():
    return FakeGenerator(error=GenerationError("LLM returned garbage"))


@pytest_asyncio.fixture
async def sqlite_db(tmp_path):
    """Initialize a throwaway SQLite database and return its directory."""
    await init_sqlite(tmp_path)
    return tmp_path
