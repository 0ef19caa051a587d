"""OpenAI chat completion client for the AI operations.

Wraps the async OpenAI SDK and turns every SDK failure into one of the
classified OperationErrors at the point it happens.
"""

import logging
import time
from typing import Any, Dict, List

import openai
from openai import AsyncOpenAI

from application.models.errors import (
    BackendFault,
    ConfigurationError,
    GenerationTimeout,
    MalformedResponse,
    NetworkUnavailable,
    ValidationError,
)
from backend.observability import OperationMetrics

logger = logging.getLogger(__name__)


class AsyncAIClient:
    """Async text generation over the OpenAI chat completions API."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Run one chat completion and return the generated text.

        Raises:
            GenerationTimeout: The request exceeded the client timeout.
            NetworkUnavailable: The API could not be reached.
            ConfigurationError: The API rejected our credentials, model or project.
            ValidationError: The API rejected the request itself (4xx); not retried.
            BackendFault: The API returned an error.
            MalformedResponse: The API answered without any text.
        """
        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        start_time = time.time()

        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APITimeoutError as e:
            logger.warning("OpenAI request timed out: %s", e)
            raise GenerationTimeout() from e
        except openai.APIConnectionError as e:
            logger.warning("OpenAI connection error: %s", e)
            raise NetworkUnavailable() from e
        except openai.AuthenticationError as e:
            logger.error("OpenAI rejected the configured API key: %s", e)
            raise ConfigurationError() from e
        except (openai.NotFoundError, openai.PermissionDeniedError) as e:
            logger.error("OpenAI rejected the configured model or project: %s", e)
            raise ConfigurationError() from e
        except (openai.BadRequestError, openai.UnprocessableEntityError) as e:
            logger.warning("OpenAI rejected the request: %s", e)
            raise ValidationError(
                f"AI service rejected the request: {getattr(e, 'message', None) or e}"
            ) from e
        except openai.APIError as e:
            logger.error("OpenAI API error: %s", e)
            raise BackendFault(getattr(e, "message", None) or str(e)) from e
        finally:
            OperationMetrics.generation_seconds().record(time.time() - start_time)

        if not completion or not completion.choices:
            raise MalformedResponse()

        text = completion.choices[0].message.content
        if not text:
            raise MalformedResponse()
        return text
