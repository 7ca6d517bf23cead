"""
Flashcard generation service.

Turns a study material into card drafts:
  1. Calls the LLM via llm_service.chat_json()
  2. Parses {"flashcards": [{"front", "back", "difficulty"}]}
  3. Returns validated CardDraft objects; persisting them is the deck loader's job

A reply without a "flashcards" list is a GenerationError. Individual malformed
entries are logged and skipped.
"""
from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from studydeck.config import settings
from studydeck.errors import GenerationError
from studydeck.models.flashcard import CardDraft
from studydeck.services.llm_service import chat_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a flashcard generator for active recall learning. "
    "Given study material, create 15-20 high-quality flashcards. "
    "Create a good mix of definition/concept cards, example/application cards, "
    "comparison cards and process/procedure cards. "
    "Respond ONLY with valid JSON in exactly this structure:\n"
    '{"flashcards": [{"front": "string", "back": "string", "difficulty": "medium"}]}\n'
    "Rules:\n"
    "- difficulty is one of: easy, medium, hard.\n"
    "- front is a question or prompt answerable from the material.\n"
    "- back is a concise answer (1-3 sentences)."
)


class CardGenerator(Protocol):
    async def generate_cards(
        self, material_content: str, subject: str, title: str
    ) -> list[CardDraft]: ...


def _user_prompt(material_content: str, subject: str, title: str) -> str:
    return (
        f"Material: {material_content[: settings.material_max_chars]}\n"
        f"Subject: {subject}\n"
        f"Title: {title}"
    )


def parse_drafts(result: dict) -> list[CardDraft]:
    """Validate a generator reply. Raises GenerationError if it has no card list."""
    raw_cards = result.get("flashcards")
    if not isinstance(raw_cards, list):
        raise GenerationError("Generator reply has no 'flashcards' list")

    drafts: list[CardDraft] = []
    for raw in raw_cards:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object flashcard entry: %r", raw)
            continue
        try:
            draft = CardDraft.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping malformed flashcard entry: %s", e)
            continue
        if not draft.front or not draft.back:
            continue
        drafts.append(draft)
    return drafts


class LLMCardGenerator:
    async def generate_cards(
        self, material_content: str, subject: str, title: str
    ) -> list[CardDraft]:
        result = await chat_json(
            SYSTEM_PROMPT, _user_prompt(material_content, subject, title)
        )
        drafts = parse_drafts(result)
        logger.info("Generated %d flashcards for %r", len(drafts), title)
        return drafts


def get_card_generator() -> CardGenerator:
    return LLMCardGenerator()
