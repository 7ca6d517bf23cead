"""
Review session router.

Endpoints:
  POST   /review/sessions                   — open a session on a material
  GET    /review/sessions/{sid}             — current card, stats, progress
  POST   /review/sessions/{sid}/reveal      — show the back of the card
  POST   /review/sessions/{sid}/hide        — hide it again
  POST   /review/sessions/{sid}/answer      — grade the card, persist its schedule
  POST   /review/sessions/{sid}/reset       — zero stats, rewind to the first card
  POST   /review/sessions/{sid}/regenerate  — add a generated batch to the deck
  DELETE /review/sessions/{sid}             — discard the session
"""
from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException

from studydeck.db.store import CardStore, get_card_store
from studydeck.errors import (
    CardNotFoundError,
    GenerationError,
    MaterialNotFoundError,
    SessionError,
    SessionNotFoundError,
    StoreError,
    StudyDeckError,
)
from studydeck.models.session import (
    AnswerRequest,
    AnswerView,
    RegenerateView,
    SessionCreate,
    SessionView,
    StatsView,
)
from studydeck.services.clock import Clock, get_clock
from studydeck.services.deck_loader import DeckLoader
from studydeck.services.flashcard_generator import CardGenerator, get_card_generator
from studydeck.services.review_session import ReviewSession
from studydeck.services.session_registry import (
    discard_session,
    get_session,
    register_session,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _raise_http(error: StudyDeckError) -> NoReturn:
    if isinstance(error, (SessionNotFoundError, MaterialNotFoundError, CardNotFoundError)):
        raise HTTPException(status_code=404, detail=str(error)) from error
    if isinstance(error, SessionError):
        raise HTTPException(status_code=409, detail=str(error)) from error
    if isinstance(error, GenerationError):
        logger.warning("Flashcard generation failed: %s", error)
        raise HTTPException(status_code=502, detail=str(error)) from error
    if isinstance(error, StoreError):
        logger.error("Card store failure: %s", error)
        raise HTTPException(status_code=503, detail=str(error)) from error
    raise HTTPException(status_code=500, detail=str(error)) from error


def _view(session_id: str, session: ReviewSession) -> SessionView:
    return SessionView(
        id=session_id,
        material_id=session.material_id,
        status=session.status,
        card=session.current_card,
        revealed=session.revealed,
        pointer=session.pointer,
        deck_size=len(session.queue),
        progress=session.progress,
        stats=StatsView(
            correct=session.stats.correct,
            incorrect=session.stats.incorrect,
            total=session.stats.total,
            accuracy=session.stats.accuracy,
        ),
    )


def _lookup(session_id: str) -> ReviewSession:
    try:
        return get_session(session_id)
    except SessionNotFoundError as e:
        _raise_http(e)


@router.post("/sessions", response_model=SessionView, status_code=201)
async def open_session(
    body: SessionCreate,
    store: CardStore = Depends(get_card_store),
    generator: CardGenerator = Depends(get_card_generator),
    clock: Clock = Depends(get_clock),
) -> SessionView:
    """Load (or first generate) the material's deck and start presenting it."""
    loader = DeckLoader(store, generator, clock)
    session = ReviewSession(body.material_id, loader, store, clock)
    try:
        await session.start()
    except StudyDeckError as e:
        _raise_http(e)
    session_id = register_session(session)
    return _view(session_id, session)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def read_session(session_id: str) -> SessionView:
    return _view(session_id, _lookup(session_id))


@router.post("/sessions/{session_id}/reveal", response_model=SessionView)
async def reveal(session_id: str) -> SessionView:
    session = _lookup(session_id)
    try:
        session.reveal()
    except StudyDeckError as e:
        _raise_http(e)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/hide", response_model=SessionView)
async def hide(session_id: str) -> SessionView:
    session = _lookup(session_id)
    try:
        session.hide()
    except StudyDeckError as e:
        _raise_http(e)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/answer", response_model=AnswerView)
async def answer(session_id: str, body: AnswerRequest) -> AnswerView:
    session = _lookup(session_id)
    try:
        result = await session.answer(body.correct)
    except StudyDeckError as e:
        _raise_http(e)
    return AnswerView(
        card=result.card,
        interval_days=result.interval_days,
        refreshed=result.refreshed,
        session=_view(session_id, session),
    )


@router.post("/sessions/{session_id}/reset", response_model=SessionView)
async def reset(session_id: str) -> SessionView:
    session = _lookup(session_id)
    try:
        session.reset()
    except StudyDeckError as e:
        _raise_http(e)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/regenerate", response_model=RegenerateView)
async def regenerate(session_id: str) -> RegenerateView:
    session = _lookup(session_id)
    try:
        created = await session.regenerate()
    except StudyDeckError as e:
        _raise_http(e)
    return RegenerateView(created=created, session=_view(session_id, session))


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str) -> None:
    try:
        discard_session(session_id)
    except SessionNotFoundError as e:
        _raise_http(e)
