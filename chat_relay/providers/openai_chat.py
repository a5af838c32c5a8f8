"""
OpenAI chat completions client
------------------------------

`OpenAIChatClient` is the `UpstreamClient` the relay uses in production. It
POSTs an already assembled payload to `{base_url}/chat/completions` and
hands the upstream response back untouched, so the router can return the
body to the browser byte for byte.

1) Base URL
   - Defaults to OpenAI's public API (`https://api.openai.com/v1`). Any
     server exposing the same route can be used through `OPENAI_BASE_URL`.

2) Authentication
   - The server-held key is sent as a Bearer token. The browser never
     supplies it and inbound Authorization headers are not forwarded.

3) Error handling
   - A non-2xx reply becomes `UpstreamError(status, body)`; the body is the
     decoded JSON when possible and the raw text otherwise.
   - A request that never gets a response (DNS failure, refused
     connection, transport timeout) becomes `UpstreamUnavailableError`.
   - Nothing is retried.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from chat_relay.config import DEFAULT_OPENAI_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from chat_relay.errors import UpstreamError, UpstreamUnavailableError
from chat_relay.providers.base import UpstreamClient

logger = logging.getLogger("chat_relay.upstream")


class OpenAIChatClient(UpstreamClient):
    """Client for the OpenAI Chat Completions endpoint.

    Attributes:
        base_url: Base URL of the API, without a trailing slash.
        timeout_seconds: Transport timeout applied to the whole call.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
                   in tests. ``None`` uses the default network transport.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def create_chat_completion(
        self, payload: Dict[str, Any], api_key: str
    ) -> httpx.Response:
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": self.timeout_seconds,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        try:
            async with httpx.AsyncClient(**kwargs) as client:
                response = await client.post(
                    "/chat/completions",
                    headers=self._headers(api_key),
                    json=payload,
                )
        except httpx.RequestError as exc:
            logger.error(
                "No response received from API (%s): %s", type(exc).__name__, exc
            )
            raise UpstreamUnavailableError() from exc

        if not response.is_success:
            body = _decode_body(response)
            logger.error("API response error (%s): %s", response.status_code, body)
            raise UpstreamError(response.status_code, body)
        return response


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
