from unittest.mock import AsyncMock, patch

import pytest

from studydeck.errors import GenerationError, LLMUnavailableError
from studydeck.models.flashcard import Difficulty
from studydeck.services.flashcard_generator import LLMCardGenerator, parse_drafts


class TestParseDrafts:
    def test_valid_reply(self):
        drafts = parse_drafts(
            {
                "flashcards": [
                    {"front": "What is ATP?", "back": "Energy carrier", "difficulty": "easy"},
                    {"front": "Define osmosis", "back": "Water diffusion", "difficulty": "HARD"},
                ]
            }
        )
        assert [d.front for d in drafts] == ["What is ATP?", "Define osmosis"]
        assert [d.difficulty for d in drafts] == [Difficulty.EASY, Difficulty.HARD]

    def test_missing_list_is_an_error(self):
        with pytest.raises(GenerationError):
            parse_drafts({"cards": []})

    def test_extra_fields_are_ignored(self):
        (draft,) = parse_drafts(
            {"flashcards": [{"front": "Q", "back": "A", "topic": "x", "hint": "y"}]}
        )
        assert draft.model_dump() == {"front": "Q", "back": "A", "difficulty": Difficulty.MEDIUM}

    def test_unknown_difficulty_falls_back_to_medium(self):
        (draft,) = parse_drafts(
            {"flashcards": [{"front": "Q", "back": "A", "difficulty": "brutal"}]}
        )
        assert draft.difficulty is Difficulty.MEDIUM

    def test_malformed_entries_are_skipped(self):
        drafts = parse_drafts(
            {
                "flashcards": [
                    "not an object",
                    {"front": "Only a front"},
                    {"front": "  ", "back": "blank front"},
                    {"front": "Q", "back": "A"},
                ]
            }
        )
        assert [(d.front, d.back) for d in drafts] == [("Q", "A")]


@pytest.mark.asyncio
async def test_llm_generator_sends_material_and_parses_reply():
    reply = {"flashcards": [{"front": "Q", "back": "A", "difficulty": "medium"}]}
    with patch(
        "studydeck.services.flashcard_generator.chat_json",
        new_callable=AsyncMock,
        return_value=reply,
    ) as mock_chat:
        drafts = await LLMCardGenerator().generate_cards("Krebs cycle text", "biology", "Metabolism")

    assert len(drafts) == 1
    system_prompt, user_prompt = mock_chat.call_args.args
    assert "flashcards" in system_prompt
    assert "Krebs cycle text" in user_prompt
    assert "Subject: biology" in user_prompt
    assert "Title: Metabolism" in user_prompt


@pytest.mark.asyncio
async def test_llm_generator_propagates_unavailable():
    with patch(
        "studydeck.services.flashcard_generator.chat_json",
        new_callable=AsyncMock,
        side_effect=LLMUnavailableError("no model"),
    ):
        with pytest.raises(GenerationError):
            await LLMCardGenerator().generate_cards("text", "", "Title")
