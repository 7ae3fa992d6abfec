"""Tests for the chat-completions client."""

from unittest.mock import AsyncMock

import httpx
import pytest

from sales_copilot.core.config import LLMSettings
from sales_copilot.core.exceptions import APIClientError, APITimeoutError
from sales_copilot.core.llm_client import BaseLLMClient, ChatCompletionClient


@pytest.fixture
def client() -> ChatCompletionClient:
    return ChatCompletionClient(api_key="test-key", model="test-model", retry_delay=0)


class TestChatCompletionClient:
    def test_build_messages_with_system_instruction(self) -> None:
        messages = ChatCompletionClient.build_messages("Hi", "Be brief")

        assert messages == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Hi"},
        ]

    def test_build_messages_without_system_instruction(self) -> None:
        assert ChatCompletionClient.build_messages("Hi") == [{"role": "user", "content": "Hi"}]

    def test_from_settings(self) -> None:
        settings = LLMSettings(
            api_key="k", model="m", api_url="https://llm.example.com/v1/chat/completions", max_retries=4
        )

        client = ChatCompletionClient.from_settings(settings)

        assert client.model == "m"
        assert client.client.base_url == "https://llm.example.com/v1/chat/completions"
        assert client.client.max_retries == 4

    @pytest.mark.asyncio
    async def test_generate_content_returns_message_text(self, client: ChatCompletionClient) -> None:
        client.client.call_api = AsyncMock(
            return_value={"choices": [{"message": {"role": "assistant", "content": "[SUMMARY]\nFoo"}}]}
        )

        text = await client.generate_content("Pitch", system_instruction="System")

        assert text == "[SUMMARY]\nFoo"
        payload = client.client.call_api.await_args.kwargs["payload"]
        assert payload["model"] == "test-model"
        assert payload["temperature"] == 0.7
        assert payload["messages"][0] == {"role": "system", "content": "System"}

    @pytest.mark.asyncio
    async def test_missing_choices_is_an_error(self, client: ChatCompletionClient) -> None:
        client.client.call_api = AsyncMock(return_value={"error": "nope"})

        with pytest.raises(APIClientError):
            await client.generate_content("Pitch")

    @pytest.mark.asyncio
    async def test_empty_content_returns_empty_string(self, client: ChatCompletionClient) -> None:
        client.client.call_api = AsyncMock(return_value={"choices": [{"message": {"content": None}}]})

        assert await client.generate_content("Pitch") == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            {"choices": ["[SUMMARY]\nFoo"]},
            {"choices": [{"message": "[SUMMARY]\nFoo"}]},
            {"choices": {"message": {"content": "Foo"}}},
        ],
    )
    async def test_malformed_choice_is_an_api_error(self, client: ChatCompletionClient, response) -> None:
        client.client.call_api = AsyncMock(return_value=response)

        with pytest.raises(APIClientError, match="Invalid response format"):
            await client.generate_content("Pitch")

    def test_total_timeout_delegates_to_http_client(self) -> None:
        client = ChatCompletionClient(api_key="k", timeout=30, max_retries=2, retry_delay=1)

        assert client.total_timeout == 30 * 2 + 1


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


class TestBaseLLMClientRetries:
    """Retry behaviour of the HTTP layer, driven through httpx.MockTransport."""

    @pytest.fixture(autouse=True)
    def patch_async_client(self, monkeypatch):
        self.handler = None
        real_client = httpx.AsyncClient

        def factory(*args, **kwargs):
            kwargs["transport"] = _transport(self.handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_succeeds(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, text="busy")
            return httpx.Response(200, json={"ok": True})

        self.handler = handler
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", max_retries=3, retry_delay=0)

        assert await client.call_api({"x": 1}) == {"ok": True}
        assert len(calls) == 3
        assert calls[0].headers["Authorization"] == "Bearer k"

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, text="bad key")

        self.handler = handler
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", max_retries=3, retry_delay=0)

        with pytest.raises(APIClientError, match="401"):
            await client.call_api({})
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, text="slow down")

        self.handler = handler
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", max_retries=2, retry_delay=0)

        with pytest.raises(APIClientError):
            await client.call_api({})
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_timeouts_raise_api_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        self.handler = handler
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", max_retries=2, retry_delay=0)

        with pytest.raises(APITimeoutError):
            await client.call_api({})

    @pytest.mark.asyncio
    async def test_non_json_body_is_an_api_error(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="<html>Bad Gateway</html>")

        self.handler = handler
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", max_retries=3, retry_delay=0)

        with pytest.raises(APIClientError, match="Invalid JSON") as exc_info:
            await client.call_api({})
        assert isinstance(exc_info.value.original_error, ValueError)
        assert len(calls) == 1


class TestTotalTimeout:
    def test_covers_every_attempt_and_backoff(self) -> None:
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", timeout=10, max_retries=3, retry_delay=2)

        # 3 attempts of 10s, then waits of 2s and 4s between them
        assert client.total_timeout == 36

    def test_single_attempt_has_no_backoff(self) -> None:
        client = BaseLLMClient(api_key="k", base_url="https://llm.test/v1", timeout=10, max_retries=1, retry_delay=2)

        assert client.total_timeout == 10

    def test_exceeds_per_attempt_timeout_when_retrying(self) -> None:
        client = ChatCompletionClient.from_settings(LLMSettings(api_key="k", timeout_seconds=90, max_retries=2))

        assert client.total_timeout > client.client.timeout
