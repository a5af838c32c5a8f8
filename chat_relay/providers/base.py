from abc import ABC, abstractmethod
from typing import Any, Dict

import httpx


class UpstreamClient(ABC):
    """Interface for the completion API the relay forwards to.

    Implementations return the raw upstream response on success and raise
    ``UpstreamError`` or ``UpstreamUnavailableError`` otherwise, so the API
    layer only has to render them.
    """

    @abstractmethod
    async def create_chat_completion(
        self, payload: Dict[str, Any], api_key: str
    ) -> httpx.Response: ...
