"""
Interactive review session over one material's deck.

Status flow:
    idle -> loading -> presenting -> revealed -> answering -> presenting ...
    idle -> loading -> empty (deck has no cards)

The pointer walks the deck round-robin and wraps to 0 after the last card, so
a session never finishes on its own. After every committed answer the deck is
re-fetched and re-sorted, which picks up due-date changes and writes from
other clients.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from studydeck.db.store import CardStore
from studydeck.errors import (
    AnswerInProgressError,
    CardNotFoundError,
    InvalidTransitionError,
    SessionBusyError,
    StudyDeckError,
)
from studydeck.models.flashcard import Flashcard
from studydeck.models.session import SessionStatus
from studydeck.services.clock import Clock, system_clock
from studydeck.services.deck_loader import DeckLoader
from studydeck.services.scheduler import schedule_answer

logger = logging.getLogger(__name__)

_BUSY = (SessionStatus.LOADING, SessionStatus.ANSWERING)


@dataclass
class SessionStats:
    """Correct/incorrect tally for the current session only."""

    correct: int = 0
    incorrect: int = 0
    total: int = 0

    def record(self, is_correct: bool) -> None:
        self.total += 1
        if is_correct:
            self.correct += 1
        else:
            self.incorrect += 1

    def reset(self) -> None:
        self.correct = 0
        self.incorrect = 0
        self.total = 0

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total * 100


@dataclass
class AnswerResult:
    card: Flashcard  # the card as stored after the answer
    interval_days: int
    refreshed: bool  # False when the deck reload failed and the queue is stale


class ReviewSession:
    def __init__(
        self,
        material_id: str,
        loader: DeckLoader,
        store: CardStore,
        clock: Clock = system_clock,
    ) -> None:
        self.material_id = material_id
        self.loader = loader
        self.store = store
        self.clock = clock

        self.status = SessionStatus.IDLE
        self.queue: list[Flashcard] = []
        self.pointer = 0
        self.revealed = False
        self.stats = SessionStats()

    # --- Accessors ---

    @property
    def current_card(self) -> Flashcard | None:
        if self.status in (SessionStatus.IDLE, SessionStatus.EMPTY) or not self.queue:
            return None
        return self.queue[self.pointer]

    @property
    def progress(self) -> float:
        if not self.queue:
            return 0.0
        return (self.pointer + 1) / len(self.queue) * 100

    # --- Transitions ---

    async def start(self) -> None:
        """Load the deck and present its first card. Errors leave the session idle."""
        self._ensure_not_busy("start")
        self.status = SessionStatus.LOADING
        try:
            queue = await self.loader.load_deck(self.material_id)
        except BaseException:
            self.status = SessionStatus.IDLE
            raise

        self.queue = queue
        self.pointer = 0
        self.revealed = False
        self.status = SessionStatus.PRESENTING if queue else SessionStatus.EMPTY

    def reveal(self) -> None:
        if self.status is not SessionStatus.PRESENTING:
            raise InvalidTransitionError("reveal", self.status.value)
        self.revealed = True
        self.status = SessionStatus.REVEALED

    def hide(self) -> None:
        if self.status is not SessionStatus.REVEALED:
            raise InvalidTransitionError("hide", self.status.value)
        self.revealed = False
        self.status = SessionStatus.PRESENTING

    async def answer(self, is_correct: bool) -> AnswerResult:
        """
        Grade the current card, persist the new schedule and move on.

        Nothing local changes unless the store write succeeds, so a failed
        call can be retried as-is. The one exception is a card that no longer
        exists: it is dropped from the session before the error is re-raised.
        A failed deck reload after a successful write is logged and leaves the
        previous queue in place.
        """
        if self.status is SessionStatus.ANSWERING:
            raise AnswerInProgressError("An answer is already being saved")
        if self.status is not SessionStatus.REVEALED:
            raise InvalidTransitionError("answer", self.status.value)

        card = self.queue[self.pointer]
        update, interval_days = schedule_answer(card, is_correct, self.clock.today())

        self.status = SessionStatus.ANSWERING
        try:
            updated = await self.store.update_card(card.id, update)
        except CardNotFoundError:
            await self._drop_card(card.id)
            raise
        except BaseException:
            self.status = SessionStatus.REVEALED
            raise

        try:
            self.stats.record(is_correct)
            self.pointer = (self.pointer + 1) % len(self.queue)
            self.revealed = False
            self.queue = [updated if c.id == updated.id else c for c in self.queue]
            refreshed = await self._refresh()
        finally:
            if self.status is SessionStatus.ANSWERING:
                self.status = SessionStatus.PRESENTING

        return AnswerResult(card=updated, interval_days=interval_days, refreshed=refreshed)

    def reset(self) -> None:
        """Zero the stats and rewind to the first card; the queue is kept."""
        self._ensure_not_busy("reset")
        self.stats.reset()
        self.pointer = 0
        self.revealed = False
        if self.status is SessionStatus.REVEALED:
            self.status = SessionStatus.PRESENTING

    async def regenerate(self) -> int:
        """Add a freshly generated batch to the material and reload the deck."""
        self._ensure_not_busy("regenerate")
        previous = self.status
        self.status = SessionStatus.LOADING
        try:
            created = await self.loader.generate(self.material_id)
            queue = await self.loader.load_deck(self.material_id)
        except BaseException:
            self.status = previous
            raise

        self.queue = queue
        if not queue:
            self.pointer = 0
            self.revealed = False
            self.status = SessionStatus.EMPTY
        elif previous in (SessionStatus.IDLE, SessionStatus.EMPTY):
            self.pointer = 0
            self.revealed = False
            self.status = SessionStatus.PRESENTING
        else:
            self.pointer %= len(queue)
            self.status = SessionStatus.REVEALED if self.revealed else SessionStatus.PRESENTING
        return created

    # --- Internals ---

    def _ensure_not_busy(self, action: str) -> None:
        if self.status in _BUSY:
            raise SessionBusyError(f"Cannot {action} while session is {self.status.value}")

    async def _drop_card(self, card_id: str) -> None:
        logger.warning(
            "Flashcard %s is gone, dropping it from session on material %s",
            card_id,
            self.material_id,
        )
        self.queue = [c for c in self.queue if c.id != card_id]
        self.revealed = False
        try:
            await self._refresh()
        finally:
            if not self.queue:
                self.pointer = 0
                self.status = SessionStatus.EMPTY
            else:
                self.pointer %= len(self.queue)
                self.status = SessionStatus.PRESENTING

    async def _refresh(self) -> bool:
        try:
            queue = await self.loader.load_deck(self.material_id)
        except StudyDeckError as e:
            logger.warning(
                "Deck reload failed for material %s, keeping stale queue: %s",
                self.material_id,
                e,
            )
            return False

        self.queue = queue
        if not queue:
            self.pointer = 0
            self.status = SessionStatus.EMPTY
        else:
            self.pointer %= len(queue)
        return True
