"""
Flashcard browsing router.

Endpoints:
  GET    /flashcards/?material_id=  — a material's cards in deck order
  GET    /flashcards/stats          — total and due counts, per material
  GET    /flashcards/{id}           — single card
  DELETE /flashcards/{id}           — delete card

Grading happens through /review sessions, never here.
"""
from __future__ import annotations

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studydeck.db.sqlite import (
    delete_flashcard,
    get_db,
    get_deck_stats,
    get_flashcard,
    list_flashcards,
)
from studydeck.models.flashcard import DeckStats, Flashcard, FlashcardList
from studydeck.services.clock import Clock, get_clock
from studydeck.services.deck_loader import due_cards, sort_deck

router = APIRouter()


@router.get("/", response_model=FlashcardList)
async def list_cards(
    material_id: str = Query(...),
    due_only: bool = Query(default=False),
    db: aiosqlite.Connection = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> FlashcardList:
    """List a material's cards ordered by next review date."""
    items = sort_deck(await list_flashcards(db, material_id))
    if due_only:
        items = due_cards(items, clock.today())
    return FlashcardList(items=items, total=len(items))


@router.get("/stats", response_model=DeckStats)
async def deck_stats(
    db: aiosqlite.Connection = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DeckStats:
    return await get_deck_stats(db, clock.today())


@router.get("/{card_id}", response_model=Flashcard)
async def get_card(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    card = await get_flashcard(db, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return card


@router.delete("/{card_id}", status_code=204)
async def remove_card(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> None:
    deleted = await delete_flashcard(db, card_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Flashcard not found")
