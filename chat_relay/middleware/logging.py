import time
import logging

_logger = logging.getLogger("chat_relay.request")


def configure_logging(level_name: str) -> None:
    """Attach a stdout handler to the ``chat_relay`` logger tree.

    Global logging is left alone so Uvicorn keeps managing its own
    handlers and formatters.
    """
    root = logging.getLogger("chat_relay")
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        # Avoid duplicate logs if propagation would also emit via root
        root.propagate = False
    for handler in root.handlers:
        handler.setLevel(level)


async def request_logging_middleware(request, call_next):
    # Every request is logged on receipt; the timestamp comes from the formatter
    _logger.info("%s %s", request.method, request.url.path)

    settings = getattr(request.app.state, "settings", None)
    if not (settings and settings.log_requests):
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000.0
    rid = getattr(
        request.state, "request_id", request.headers.get("x-request-id") or "-"
    )
    client = request.client.host if request.client else ""
    _logger.info(
        "rid=%s method=%s path=%s status=%s duration_ms=%.2f client=%s origin=%s",
        rid,
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        client,
        request.headers.get("origin", ""),
    )

    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug(
            "response rid=%s status=%s content_length=%s",
            rid,
            response.status_code,
            response.headers.get("content-length"),
        )

    return response
