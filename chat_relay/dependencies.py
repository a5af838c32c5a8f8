from fastapi import Request

from chat_relay.config import RelaySettings
from chat_relay.providers.base import UpstreamClient


def get_settings(request: Request) -> RelaySettings:
    return request.app.state.settings


def get_upstream(request: Request) -> UpstreamClient:
    """Upstream client built by ``create_app``.

    Tests can override this dependency to inject a fake upstream without
    touching the network.
    """
    return request.app.state.upstream
