"""
Deck loading: fetch a material's cards, generating a first batch when the
material has none, and order them by due date.
"""
from __future__ import annotations

import logging
from datetime import date

from studydeck.db.store import CardStore
from studydeck.errors import MaterialNotFoundError
from studydeck.models.flashcard import Flashcard
from studydeck.services.clock import Clock, system_clock
from studydeck.services.flashcard_generator import CardGenerator

logger = logging.getLogger(__name__)


def sort_deck(cards: list[Flashcard]) -> list[Flashcard]:
    """Order by next_review ascending; ties keep fetch order."""
    return sorted(cards, key=lambda card: card.next_review)


def due_cards(cards: list[Flashcard], today: date) -> list[Flashcard]:
    return [card for card in cards if card.is_due(today)]


class DeckLoader:
    def __init__(
        self,
        store: CardStore,
        generator: CardGenerator,
        clock: Clock = system_clock,
    ) -> None:
        self.store = store
        self.generator = generator
        self.clock = clock

    async def load_deck(self, material_id: str) -> list[Flashcard]:
        cards = await self.store.list_cards(material_id)
        if not cards:
            created = await self.generate(material_id)
            if created:
                cards = await self.store.list_cards(material_id)
        return sort_deck(cards)

    async def generate(self, material_id: str) -> int:
        """
        Generate a batch of cards for a material and persist them.

        All drafts are produced before anything is written and the batch is
        stored in one transaction, so a failure leaves the store untouched.
        Returns the number of cards created.
        """
        material = await self.store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)

        drafts = await self.generator.generate_cards(
            material.extracted_content, material.subject, material.title
        )
        if not drafts:
            logger.info("Material %s: generator produced no flashcards", material_id)
            return 0

        created = await self.store.create_cards(
            material_id, drafts, next_review=self.clock.today()
        )
        logger.info("Material %s: created %d flashcards", material_id, len(created))
        return len(created)
