import uuid
import time
from chat_relay.metrics import http_requests_total, http_request_duration_seconds


def _observe(request, status: str, duration: float) -> None:
    method = request.method
    path = request.url.path
    http_requests_total.labels(method=method, path=path, status=status).inc()
    http_request_duration_seconds.labels(
        method=method, path=path, status=status
    ).observe(duration)


async def request_id_and_metrics_middleware(request, call_next):
    start_time = time.perf_counter()
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:
        _observe(request, "500", time.perf_counter() - start_time)
        raise
    _observe(request, str(response.status_code), time.perf_counter() - start_time)
    response.headers["x-request-id"] = request_id
    return response
