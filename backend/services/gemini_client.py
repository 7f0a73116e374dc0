"""Google Gemini API wrapper with error handling."""

import asyncio
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def is_configured() -> bool:
    return bool(settings.gemini_api_key)


def _strip_fences(text: str) -> str:
    """Strip markdown code fences if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


async def generate_text(
    prompt: str,
    system_instruction: str | None = None,
    temperature: float | None = None,
    max_output_tokens: int = 1024,
) -> str | None:
    """Send a prompt to Gemini and return the plain-text response."""
    client = get_client()
    if client is None:
        return None

    config = types.GenerateContentConfig(
        temperature=settings.gemini_temperature if temperature is None else temperature,
        max_output_tokens=max_output_tokens,
        system_instruction=system_instruction,
    )
    try:
        # The SDK call is blocking
        response = await asyncio.to_thread(
            client.models.generate_content,
            model=settings.gemini_model,
            contents=prompt,
            config=config,
        )
        text = _strip_fences(response.text or "")
        if not text:
            logger.warning("Gemini returned an empty response")
            return None
        return text

    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return None
