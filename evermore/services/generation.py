"""Persona reply generation using the OpenAI chat completions API."""

import logging

from openai import OpenAI, OpenAIError

from evermore.config import get_settings
from evermore.errors import UpstreamServiceError

logger = logging.getLogger("evermore")

FALLBACK_REPLY = "I'm sorry, I couldn't respond right now."


class ResponseGenerator:
    """Turns a persona prompt plus one user utterance into a short reply."""

    def __init__(self) -> None:
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Lazy-build the OpenAI client. Retries are left to the caller."""
        if self._client is None:
            settings = get_settings()
            self._client = OpenAI(
                api_key=settings.OPENAI_API_KEY or None,
                timeout=settings.LLM_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._client

    def generate(self, system_prompt: str, user_text: str) -> str:
        """Request one bounded completion. Raises UpstreamServiceError on any client failure."""
        settings = get_settings()
        try:
            response = self._get_client().chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_text},
                ],
                max_tokens=settings.LLM_MAX_TOKENS,
                temperature=settings.LLM_TEMPERATURE,
            )
        except OpenAIError as e:
            logger.error("Text generation failed: %s", e)
            raise UpstreamServiceError("Failed to generate AI response") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            return FALLBACK_REPLY
        return content.strip()


_response_generator: ResponseGenerator | None = None


def get_response_generator() -> ResponseGenerator:
    """Get singleton response generator instance."""
    global _response_generator
    if _response_generator is None:
        _response_generator = ResponseGenerator()
    return _response_generator
