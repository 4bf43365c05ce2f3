"""Client for the remote chat completion endpoint."""

import logging
import time
from typing import Optional, Sequence

import httpx

from ..core.config import ProviderConfig
from ..core.exceptions import (
    ApiErrorException,
    AuthenticationException,
    CompletionTimeoutException,
    UnreachableException,
)
from ..models.chat import CompletionRequest, CompletionResponse
from ..models.memory import ConversationTurn

logger = logging.getLogger(__name__)


class CompletionClient:
    """Sends conversation transcripts to an OpenWebUI-compatible API."""

    def __init__(
        self,
        provider: ProviderConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        log_api_calls: bool = True
    ):
        """
        Initialize completion client.

        Args:
            provider: Endpoint, credential and model settings
            http_client: Shared client to reuse; one is built from ``provider`` if omitted
            log_api_calls: Log model, size and latency of every call
        """
        self.provider = provider
        self.log_api_calls = log_api_calls
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=provider.url,
            headers={"Authorization": f"Bearer {provider.api_key}"},
            timeout=provider.request_timeout,
        )

    async def complete(self, messages: Sequence[ConversationTurn]) -> str:
        """
        Run one completion call over an already trimmed transcript.

        Args:
            messages: System turn, history and the new user turn, in order

        Returns:
            The assistant text; an absent or null content is returned as ""

        Raises:
            CompletionTimeoutException: If the request timed out
            UnreachableException: If the server could not be reached
            AuthenticationException: On HTTP 401
            ApiErrorException: On any other non-2xx status or a malformed body
        """
        request = CompletionRequest(model=self.provider.model, messages=list(messages))
        start_time = time.time()

        try:
            response = await self.http_client.post(
                self.provider.endpoint,
                json=request.to_payload(),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"⏳ Completion request timed out after {self.provider.request_timeout}s")
            raise CompletionTimeoutException(self.provider.request_timeout, e)
        except httpx.RequestError as e:
            logger.error(f"❌ Cannot reach completion server: {e}")
            raise UnreachableException(str(e) or e.__class__.__name__, e)

        if response.status_code == 401:
            logger.error("❌ Completion API rejected the API key")
            raise AuthenticationException()

        if not response.is_success:
            logger.error(f"❌ Completion API error {response.status_code}: {response.text[:200]}")
            raise ApiErrorException(response.status_code, response.text)

        try:
            result = CompletionResponse.from_payload(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            logger.error(f"❌ Malformed completion response: {e}")
            raise ApiErrorException(response.status_code, f"Malformed response: {e}")

        if self.log_api_calls:
            response_time = time.time() - start_time
            logger.info(
                f"✅ {self.provider.model} response ({response_time:.2f}s, "
                f"{len(request.messages)} turns): {len(result.content)} chars"
            )

        return result.content

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.http_client.aclose()
