from pydantic import BaseModel, ValidationError
from typing import Any, Dict, List, Optional, Union

from chat_relay.errors import InvalidChatRequestError

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1500


class ChatRequest(BaseModel):
    # Message contents are forwarded verbatim, so they are not modelled
    messages: List[Any]
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class ErrorResponse(BaseModel):
    error: str
    details: Union[str, Dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str


def parse_chat_request(body: Any) -> ChatRequest:
    """Validate a decoded JSON body into a ChatRequest.

    Raises InvalidChatRequestError when ``messages`` is missing or is not an
    array, or when an optional field has the wrong type.
    """
    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise InvalidChatRequestError()
    try:
        return ChatRequest.model_validate(body)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise InvalidChatRequestError(f"{field}: {first.get('msg', 'invalid value')}")


def build_upstream_payload(request: ChatRequest, default_model: str) -> Dict[str, Any]:
    """Assemble the body sent to the chat completions endpoint."""
    return {
        "model": request.model or default_model,
        "messages": request.messages,
        "temperature": (
            request.temperature
            if request.temperature is not None
            else DEFAULT_TEMPERATURE
        ),
        "max_tokens": (
            request.max_tokens if request.max_tokens is not None else DEFAULT_MAX_TOKENS
        ),
    }
