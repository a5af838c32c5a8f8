from fastapi import APIRouter, Depends, Request, Response
import logging
import time

from chat_relay.config import RelaySettings
from chat_relay.dependencies import get_settings, get_upstream
from chat_relay.errors import (
    ConfigurationError,
    InternalRelayError,
    InvalidChatRequestError,
    RelayError,
    UpstreamError,
    UpstreamUnavailableError,
)
from chat_relay.metrics import (
    upstream_requests_total,
    upstream_request_duration_seconds,
)
from chat_relay.providers.base import UpstreamClient
from chat_relay.schemas.chat import (
    ErrorResponse,
    build_upstream_payload,
    parse_chat_request,
)

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger("chat_relay.chat")

_error_responses = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


async def _forward(upstream: UpstreamClient, payload: dict, api_key: str):
    start = time.perf_counter()
    outcome = "success"
    try:
        return await upstream.create_chat_completion(payload, api_key)
    except UpstreamError:
        outcome = "upstream_error"
        raise
    except UpstreamUnavailableError:
        outcome = "unavailable"
        raise
    except Exception:
        outcome = "error"
        raise
    finally:
        upstream_requests_total.labels(outcome=outcome).inc()
        upstream_request_duration_seconds.labels(outcome=outcome).observe(
            time.perf_counter() - start
        )


@router.post("/chat", responses=_error_responses)
async def chat(
    request: Request,
    settings: RelaySettings = Depends(get_settings),
    upstream: UpstreamClient = Depends(get_upstream),
):
    """Relay a chat completion request to the upstream API.

    The upstream body is returned unmodified. Every failure is converted to a
    ``RelayError`` here so nothing escapes the handler unclassified.
    """
    logger.info("Received chat request")
    try:
        try:
            chat_request = parse_chat_request(await request.json())
        except InvalidChatRequestError as exc:
            logger.error("Invalid message format: %s", exc.details)
            raise

        api_key = settings.openai_api_key
        if not api_key:
            logger.error("API key is missing")
            raise ConfigurationError()

        payload = build_upstream_payload(chat_request, settings.default_model)
        logger.info(
            "Sending request to upstream API with %d messages",
            len(chat_request.messages),
        )
        upstream_response = await _forward(upstream, payload, api_key)
        logger.info("Received response from upstream API")
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Error processing chat request")
        raise InternalRelayError(str(exc)) from exc

    return Response(
        content=upstream_response.content,
        status_code=upstream_response.status_code,
        media_type=upstream_response.headers.get("content-type", "application/json"),
    )
