"""Client for an OpenAI-compatible chat-completions endpoint."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException

from sales_copilot.core.config import LLMSettings
from sales_copilot.core.exceptions import APIClientError, APITimeoutError
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseLLMClient:
    """Base client for LLM API interactions.

    Handles HTTP requests, retries with exponential backoff, timeouts and
    error logging.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        max_retries: int = 3,
        retry_delay: int = 2,
    ):
        """Initialize the LLM client.

        Args:
            api_key: API key for authentication
            base_url: Full endpoint URL
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts
            retry_delay: Base delay for exponential backoff
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = LOGGER

    @property
    def total_timeout(self) -> float:
        """Worst-case duration of call_api: every attempt timing out plus the backoff between them."""
        backoff = sum(self.retry_delay * (2 ** attempt) for attempt in range(self.max_retries - 1))
        return self.timeout * self.max_retries + backoff

    async def call_api(
        self,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST a JSON payload with retry logic.

        Returns:
            Parsed JSON response

        Raises:
            APIClientError: If the call fails after retries, with a 4xx, or returns a non-JSON body
            APITimeoutError: If every attempt timed out
        """
        request_headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        self.logger.debug(f"Calling LLM API: {self.base_url}", extra={"timeout": self.timeout})

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_retries):
                try:
                    response = await client.post(self.base_url, headers=request_headers, json=payload)
                    response.raise_for_status()
                    return self._parse_json(response)
                except HTTPStatusError as e:
                    await self._handle_http_error(e, attempt)
                except TimeoutException as e:
                    await self._handle_timeout_error(e, attempt)
                except httpx.HTTPError as e:
                    await self._handle_transport_error(e, attempt)

        raise APIClientError(f"Failed to call API {self.base_url} after {self.max_retries} attempts")

    def _parse_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            self.logger.error(
                "API returned a non-JSON body",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise APIClientError("Invalid JSON in API response", original_error=e) from e

    async def _handle_http_error(self, error: HTTPStatusError, attempt: int) -> None:
        status_code = error.response.status_code
        error_body = error.response.text

        self.logger.warning(
            f"API HTTP error (Attempt {attempt + 1}/{self.max_retries})",
            extra={"status_code": status_code, "error_body": error_body[:500]},
        )

        # Client errors other than rate limiting are not retried
        if 400 <= status_code < 500 and status_code != 429:
            raise APIClientError(f"API Client Error {status_code}", original_error=error) from error

        if attempt < self.max_retries - 1:
            await self._wait_before_retry(attempt)
        else:
            raise APIClientError(
                f"API HTTP Error {status_code} after retries", original_error=error
            ) from error

    async def _handle_timeout_error(self, error: TimeoutException, attempt: int) -> None:
        self.logger.warning(f"API Timeout (Attempt {attempt + 1}/{self.max_retries})")

        if attempt < self.max_retries - 1:
            await self._wait_before_retry(attempt)
        else:
            raise APITimeoutError(
                f"API Timeout after {self.max_retries} attempts", original_error=error
            ) from error

    async def _handle_transport_error(self, error: httpx.HTTPError, attempt: int) -> None:
        self.logger.warning(
            f"API transport error (Attempt {attempt + 1}/{self.max_retries})",
            extra={"error": str(error)},
        )

        if attempt < self.max_retries - 1:
            await self._wait_before_retry(attempt)
        else:
            raise APIClientError(f"API Error: {str(error)}", original_error=error) from error

    async def _wait_before_retry(self, attempt: int) -> None:
        """Exponential backoff wait."""
        await asyncio.sleep(self.retry_delay * (2 ** attempt))


class ChatCompletionClient:
    """Text completion over the chat-completions protocol.

    One call in, the full response text out: no streaming.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1/chat/completions",
        temperature: float = 0.7,
        timeout: int = 90,
        max_retries: int = 2,
        retry_delay: int = 2,
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
        )
        LOGGER.info(f"Initialized chat completion client with model {self.model}")

    @property
    def total_timeout(self) -> float:
        return self.client.total_timeout

    @classmethod
    def from_settings(cls, llm_settings: LLMSettings) -> "ChatCompletionClient":
        return cls(
            api_key=llm_settings.api_key,
            model=llm_settings.model,
            base_url=llm_settings.api_url,
            temperature=llm_settings.temperature,
            timeout=llm_settings.timeout_seconds,
            max_retries=llm_settings.max_retries,
            retry_delay=llm_settings.retry_delay,
        )

    @staticmethod
    def build_messages(user_content: str, system_instruction: Optional[str] = None) -> List[Dict[str, str]]:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": user_content})
        return messages

    async def generate_content(
        self,
        contents: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Generate a completion for a single user message.

        Args:
            contents: User message
            system_instruction: Optional system message
            temperature: Optional override of the configured temperature

        Returns:
            Generated text; empty string if the model returned no content

        Raises:
            APIClientError: If the call fails or the response is malformed
            APITimeoutError: If the call timed out
        """
        payload = {
            "model": self.model,
            "messages": self.build_messages(contents, system_instruction),
            "temperature": self.temperature if temperature is None else temperature,
        }

        response = await self.client.call_api(payload=payload)

        choices = response.get("choices") if isinstance(response, dict) else None
        if not choices:
            LOGGER.error(f"Unexpected completion response format: {str(response)[:500]}")
            raise APIClientError("Invalid response format from completion service")

        choice = choices[0] if isinstance(choices, list) else None
        message = (choice.get("message") or {}) if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            LOGGER.error(f"Unexpected completion choice format: {str(choices)[:500]}")
            raise APIClientError("Invalid response format from completion service")

        content = message.get("content") or ""
        if not content:
            LOGGER.warning("Empty response from completion service")
        return content
