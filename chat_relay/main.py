from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uuid
import logging
import uvicorn
from chat_relay.config import RelaySettings, load_settings
from chat_relay.errors import InternalRelayError, RelayError
from chat_relay.routers.health import router as health_router
from chat_relay.routers.chat import router as chat_router
from chat_relay.metrics import (
    registry,
    CONTENT_TYPE_LATEST,
    generate_latest,
)
from chat_relay.middleware.request_id import request_id_and_metrics_middleware
from chat_relay.middleware.logging import (
    configure_logging,
    request_logging_middleware,
)
from chat_relay.providers.base import UpstreamClient
from chat_relay.providers.openai_chat import OpenAIChatClient

logger = logging.getLogger("chat_relay.errors")


def startup_banner(port: int) -> str:
    return "\n".join(
        [
            "",
            f"  Server running on port {port}",
            "",
            f"  Health check: http://localhost:{port}/api/health",
            f"  Chat API:     http://localhost:{port}/api/chat",
            "",
        ]
    )


def create_app(
    settings: Optional[RelaySettings] = None,
    upstream: Optional[UpstreamClient] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        print(startup_banner(settings.port), flush=True)
        yield

    app = FastAPI(title="Chat Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.upstream = upstream or OpenAIChatClient(
        base_url=settings.openai_base_url,
        timeout_seconds=settings.upstream_timeout_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    # Register middlewares (the last one registered runs first)
    @app.middleware("http")
    async def _request_id_and_metrics(request, call_next):
        return await request_id_and_metrics_middleware(request, call_next)

    @app.middleware("http")
    async def _request_logging(request, call_next):
        return await request_logging_middleware(request, call_next)

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    # Backstop for anything raised outside the chat handler's own mapping
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
        logger.exception(
            "unhandled_exception rid=%s path=%s method=%s",
            request_id,
            request.url.path,
            request.method,
        )
        return JSONResponse(
            status_code=500,
            content=InternalRelayError(str(exc)).to_body(),
            headers={"x-request-id": request_id},
        )

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.include_router(health_router)
    app.include_router(chat_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the relay on 0.0.0.0:PORT."""
    settings = app.state.settings
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
