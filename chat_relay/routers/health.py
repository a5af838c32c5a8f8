from datetime import datetime, timezone

from fastapi import APIRouter

from chat_relay.schemas.chat import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="OK",
        message="Server is running",
        timestamp=_utc_timestamp(),
    )
