"""
LLM inference service for StudyDeck.

Talks to a local Ollama server (``settings.ollama_url``) in JSON mode.

Usage:
    result_dict = await chat_json(system_prompt, user_prompt)
"""
from __future__ import annotations

import json
import logging

import httpx

from studydeck.config import settings
from studydeck.errors import GenerationError, LLMUnavailableError

logger = logging.getLogger(__name__)


async def _resolve_ollama_model(client: httpx.AsyncClient) -> str | None:
    """
    Check Ollama for a pulled model matching ``settings.llm_model``.
    Returns the full Ollama model name (e.g. 'qwen2.5:3b') or None.
    """
    try:
        res = await client.get(f"{settings.ollama_url}/api/tags", timeout=1.5)
        if res.status_code != 200:
            return None
        ollama_tags: dict[str, list] = res.json()
        names = [m["name"] for m in ollama_tags.get("models", [])]
    except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Ollama tag lookup failed: %s", e)
        return None

    wanted = settings.llm_model
    wanted_prefix = wanted.split(":")[0]
    if wanted in names:
        return wanted
    for name in names:
        if name.split(":")[0] == wanted_prefix:
            return name
    return None


async def chat_json(
    system_prompt: str,
    user_prompt: str,
    max_tokens: int | None = None,
) -> dict:
    """
    Send a chat request to the LLM expecting JSON output.

    Returns a parsed dict.
    Raises LLMUnavailableError if Ollama or the configured model is missing.
    Raises GenerationError if the request fails or the reply is not a JSON object.
    """
    async with httpx.AsyncClient() as client:
        model = await _resolve_ollama_model(client)
        if model is None:
            raise LLMUnavailableError(
                f"Ollama model {settings.llm_model!r} not found at {settings.ollama_url}"
            )

        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "format": "json",
            "stream": False,
            "options": {"num_predict": max_tokens or settings.llm_max_tokens},
        }
        try:
            res = await client.post(
                f"{settings.ollama_url}/api/chat",
                json=payload,
                timeout=settings.llm_timeout,
            )
            res.raise_for_status()
            content = res.json()["message"]["content"]
        except httpx.ConnectError as e:
            raise LLMUnavailableError(f"Ollama unreachable: {e}") from e
        except (httpx.HTTPError, KeyError, ValueError) as e:
            raise GenerationError(f"Ollama inference failed: {e}") from e

    try:
        result = json.loads(content)
    except json.JSONDecodeError as e:
        raise GenerationError(f"LLM returned invalid JSON: {e}") from e
    if not isinstance(result, dict):
        raise GenerationError("LLM returned JSON that is not an object")
    return result
