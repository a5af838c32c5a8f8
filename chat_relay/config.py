import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv

DEFAULT_PORT = 5000
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 600.0
DEFAULT_CORS_ALLOW_ORIGINS: Tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:5000",
    "https://tabysty-urpaq.web.app",
)

_TRUTHY = {"1", "true", "yes"}


@dataclass(frozen=True)
class RelaySettings:
    """Process-wide configuration, read once at startup.

    Handlers receive this through dependency injection instead of reading the
    environment themselves, so tests can swap the credential or the upstream
    base URL per app instance.
    """

    port: int = DEFAULT_PORT
    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    default_model: str = DEFAULT_MODEL
    upstream_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cors_allow_origins: Tuple[str, ...] = DEFAULT_CORS_ALLOW_ORIGINS
    log_level: str = "INFO"
    log_requests: bool = False


def parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_CORS_ALLOW_ORIGINS
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)) or default)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)) or default)
    except ValueError:
        return default


def load_settings() -> RelaySettings:
    """Build settings from the environment and a .env in the working dir."""
    # Real environment variables take precedence over .env entries
    load_dotenv(find_dotenv(usecwd=True), override=False)
    return RelaySettings(
        port=_int_env("PORT", DEFAULT_PORT),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=(
            os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL
        ).rstrip("/"),
        default_model=os.getenv("OPENAI_DEFAULT_MODEL") or DEFAULT_MODEL,
        upstream_timeout_seconds=_float_env(
            "OPENAI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        ),
        cors_allow_origins=parse_origins(os.getenv("CORS_ALLOW_ORIGINS")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_requests=os.getenv("LOG_REQUESTS", "false").lower() in _TRUTHY,
    )
