"""Gemini upstream client.

Thin wrapper over google-generativeai. Every call opens a fresh chat
seeded with the caller's history, so no conversation state survives
between requests.
"""

from typing import Optional

import google.generativeai as genai
import structlog

from askgate.config import Settings

logger = structlog.get_logger()


class GeminiChat:
    """One configured Gemini model, shared read-only by all requests."""

    def __init__(self, api_key: str, model_name: str):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)

    async def send(self, history: list[dict], question: str) -> str:
        """Send question on top of history and return the answer text."""
        chat = self._model.start_chat(history=history)
        response = await chat.send_message_async(question)
        return response.text


def build_upstream(settings: Settings) -> Optional[GeminiChat]:
    """Create the Gemini client, or None if it can't be configured.

    A missing or rejected key doesn't stop the server; the proxy just
    answers 503 until it is fixed.
    """
    if not settings.gemini_configured:
        logger.error(
            "gemini.not_configured",
            hint="Set ASKGATE_GEMINI_API_KEY (or GEMINI_API_KEY); /api/ask will return 503",
        )
        return None

    try:
        upstream = GeminiChat(settings.gemini_api_key, settings.gemini_model)
    except Exception as e:
        logger.error("gemini.init_failed", model=settings.gemini_model, error=str(e))
        return None

    logger.info("gemini.initialized", model=settings.gemini_model)
    return upstream
