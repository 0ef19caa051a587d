"""AI client factory.

Builds the OpenAI SDK client from dependency-injected Settings instead of
lazily initializing a module-level global.
"""
import logging
from typing import Optional

from openai import AsyncOpenAI

from backend.services.ai_client import AsyncAIClient
from backend.settings import Settings

logger = logging.getLogger(__name__)


class AIClientFactory:
    """Factory for the generation backend client."""

    @staticmethod
    def create_openai_client(settings: Settings) -> AsyncOpenAI:
        """Create an async OpenAI client.

        SDK retries are disabled: retrying a failed generation is the client
        orchestrator's decision, never the dispatcher's.
        """
        api_key = settings.openai_api_key
        if not api_key:
            raise ValueError("OPENAI_API_KEY not configured.")

        return AsyncOpenAI(
            api_key=api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )

    @classmethod
    def create_ai_client(cls, settings: Settings) -> Optional[AsyncAIClient]:
        """Create the generation client, or None when no API key is configured."""
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not set; AI operations will report a configuration error")
            return None
        return AsyncAIClient(cls.create_openai_client(settings), model=settings.openai_model)
