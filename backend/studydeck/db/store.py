"""
Card store used by the review scheduler.

The scheduler only needs a handful of operations over the persistence layer,
so it talks to this protocol rather than to aiosqlite directly. SqliteCardStore
opens a fresh connection per call because review sessions outlive any single
request-scoped connection.
"""
from __future__ import annotations

from datetime import date
from typing import Protocol

import aiosqlite

from studydeck.db.sqlite import (
    get_material,
    insert_flashcard,
    insert_flashcards,
    list_flashcards,
    open_db,
    update_flashcard_review,
)
from studydeck.errors import CardNotFoundError, StoreError
from studydeck.models.flashcard import CardDraft, Flashcard, ReviewUpdate
from studydeck.models.material import StudyMaterial


class CardStore(Protocol):
    async def list_cards(self, material_id: str) -> list[Flashcard]: ...

    async def create_card(
        self, material_id: str, draft: CardDraft, next_review: date
    ) -> Flashcard: ...

    async def create_cards(
        self, material_id: str, drafts: list[CardDraft], next_review: date
    ) -> list[Flashcard]: ...

    async def update_card(self, card_id: str, update: ReviewUpdate) -> Flashcard: ...

    async def get_material(self, material_id: str) -> StudyMaterial | None: ...


class SqliteCardStore:
    async def list_cards(self, material_id: str) -> list[Flashcard]:
        try:
            async with open_db() as db:
                return await list_flashcards(db, material_id)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to list flashcards for {material_id}: {e}") from e

    async def create_card(
        self, material_id: str, draft: CardDraft, next_review: date
    ) -> Flashcard:
        try:
            async with open_db() as db:
                return await insert_flashcard(db, material_id, draft, next_review)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create flashcard for {material_id}: {e}") from e

    async def create_cards(
        self, material_id: str, drafts: list[CardDraft], next_review: date
    ) -> list[Flashcard]:
        try:
            async with open_db() as db:
                return await insert_flashcards(db, material_id, drafts, next_review)
        except aiosqlite.Error as e:
            raise StoreError(
                f"Failed to create {len(drafts)} flashcards for {material_id}: {e}"
            ) from e

    async def update_card(self, card_id: str, update: ReviewUpdate) -> Flashcard:
        try:
            async with open_db() as db:
                card = await update_flashcard_review(db, card_id, update)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to update flashcard {card_id}: {e}") from e
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    async def get_material(self, material_id: str) -> StudyMaterial | None:
        try:
            async with open_db() as db:
                return await get_material(db, material_id)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read material {material_id}: {e}") from e


def get_card_store() -> CardStore:
    return SqliteCardStore()
