"""Unit tests for AsyncAIClient: request shape and SDK error classification."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from application.models.errors import (
    BackendFault,
    ConfigurationError,
    GenerationTimeout,
    MalformedResponse,
    NetworkUnavailable,
    ValidationError,
)
from backend.services.ai_client import AsyncAIClient


REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


@pytest.fixture
def sdk():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion("Generated text"))
    return client


@pytest.fixture
def ai_client(sdk):
    return AsyncAIClient(sdk, model="gpt-3.5-turbo-0125")


async def _generate(ai_client):
    return await ai_client.generate(
        system_prompt="You are a market analysis expert.",
        user_prompt="Analyze fintech.",
        temperature=0.3,
        max_tokens=700,
    )


class TestGenerate:
    @pytest.mark.asyncio
    async def test_returns_text(self, ai_client, sdk):
        assert await _generate(ai_client) == "Generated text"

        call_kwargs = sdk.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-3.5-turbo-0125"
        assert call_kwargs["temperature"] == 0.3
        assert call_kwargs["max_tokens"] == 700
        assert call_kwargs["messages"] == [
            {"role": "system", "content": "You are a market analysis expert."},
            {"role": "user", "content": "Analyze fintech."},
        ]

    @pytest.mark.asyncio
    async def test_no_choices_is_malformed(self, ai_client, sdk):
        sdk.chat.completions.create.return_value = MagicMock(choices=[])
        with pytest.raises(MalformedResponse):
            await _generate(ai_client)

    @pytest.mark.asyncio
    async def test_empty_content_is_malformed(self, ai_client, sdk):
        sdk.chat.completions.create.return_value = _completion(None)
        with pytest.raises(MalformedResponse, match="No response from AI service"):
            await _generate(ai_client)


class TestErrorClassification:
    @pytest.mark.asyncio
    async def test_timeout(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.APITimeoutError(request=REQUEST)
        with pytest.raises(GenerationTimeout):
            await _generate(ai_client)

    @pytest.mark.asyncio
    async def test_connection_error(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.APIConnectionError(request=REQUEST)
        with pytest.raises(NetworkUnavailable):
            await _generate(ai_client)

    @pytest.mark.asyncio
    async def test_bad_api_key_is_configuration_error(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.AuthenticationError(
            "Incorrect API key provided",
            response=httpx.Response(401, request=REQUEST),
            body=None,
        )
        with pytest.raises(ConfigurationError) as exc_info:
            await _generate(ai_client)
        assert "API key" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_api_error_carries_provider_message(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.InternalServerError(
            "The server is overloaded",
            response=httpx.Response(500, request=REQUEST),
            body=None,
        )
        with pytest.raises(BackendFault) as exc_info:
            await _generate(ai_client)
        assert exc_info.value.message == "AI service error: The server is overloaded"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error_cls, status",
        [(openai.NotFoundError, 404), (openai.PermissionDeniedError, 403)],
    )
    async def test_unknown_model_is_configuration_error(self, ai_client, sdk, error_cls, status):
        sdk.chat.completions.create.side_effect = error_cls(
            "The model `gpt-9` does not exist",
            response=httpx.Response(status, request=REQUEST),
            body=None,
        )
        with pytest.raises(ConfigurationError) as exc_info:
            await _generate(ai_client)
        assert exc_info.value.kind.retryable is False
        assert "gpt-9" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rejected_request_is_terminal_validation_error(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.BadRequestError(
            "This model's maximum context length is 16385 tokens",
            response=httpx.Response(400, request=REQUEST),
            body=None,
        )
        with pytest.raises(ValidationError) as exc_info:
            await _generate(ai_client)
        assert exc_info.value.kind.retryable is False
        assert exc_info.value.message == (
            "AI service rejected the request: This model's maximum context length is 16385 tokens"
        )

    @pytest.mark.asyncio
    async def test_rate_limit_stays_retryable_backend_fault(self, ai_client, sdk):
        sdk.chat.completions.create.side_effect = openai.RateLimitError(
            "Rate limit reached",
            response=httpx.Response(429, request=REQUEST),
            body=None,
        )
        with pytest.raises(BackendFault) as exc_info:
            await _generate(ai_client)
        assert exc_info.value.kind.retryable is True


class TestModel:
    def test_model_property(self, ai_client):
        assert ai_client.model == "gpt-3.5-turbo-0125"
