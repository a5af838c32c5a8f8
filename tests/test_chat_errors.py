import httpx
import pytest
from fastapi.testclient import TestClient

from chat_relay.config import RelaySettings
from chat_relay.dependencies import get_upstream
from chat_relay.main import create_app
from chat_relay.providers.base import UpstreamClient
from chat_relay.providers.openai_chat import OpenAIChatClient

valid_payload = {"messages": [{"role": "user", "content": "hi"}]}


def build_client(handler, api_key="sk-test"):
    upstream = OpenAIChatClient(
        base_url="http://upstream.test/v1",
        transport=httpx.MockTransport(handler),
    )
    return TestClient(create_app(RelaySettings(openai_api_key=api_key), upstream=upstream))


def test_upstream_rate_limit_mirrors_status():
    upstream_body = {"error": {"message": "rate limited", "type": "requests"}}
    client = build_client(lambda request: httpx.Response(429, json=upstream_body))
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 429
    body = r.json()
    assert body["error"] == "rate limited"
    assert body["details"]["status"] == 429
    assert body["details"]["data"] == upstream_body


@pytest.mark.parametrize("status", [400, 401, 404, 500, 502])
def test_upstream_error_status_is_mirrored(status):
    upstream_body = {"error": {"message": f"failure {status}"}}
    client = build_client(lambda request: httpx.Response(status, json=upstream_body))
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == status
    assert r.json()["error"] == f"failure {status}"


def test_upstream_error_without_message_uses_generic_summary():
    client = build_client(lambda request: httpx.Response(500, json={"oops": True}))
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "API error"
    assert body["details"] == {"status": 500, "data": {"oops": True}}


def test_upstream_error_with_non_json_body():
    client = build_client(lambda request: httpx.Response(502, text="Bad Gateway"))
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "API error"
    assert body["details"]["data"] == "Bad Gateway"


@pytest.mark.parametrize(
    "exc_type", [httpx.ReadTimeout, httpx.ConnectError, httpx.ConnectTimeout]
)
def test_upstream_without_response_returns_503(exc_type):
    def handler(request):
        raise exc_type("no answer", request=request)

    client = build_client(handler)
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 503
    body = r.json()
    assert body["error"] == "Service unavailable"
    assert body["details"] == {"message": "No response received from API"}


def test_malformed_json_returns_internal_error():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    client = build_client(handler)
    r = client.post(
        "/api/chat",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal server error"
    assert body["details"]["message"]
    assert calls == []


def test_unexpected_upstream_failure_returns_internal_error():
    class BrokenUpstream(UpstreamClient):
        async def create_chat_completion(self, payload, api_key):
            raise RuntimeError("boom")

    app = create_app(RelaySettings(openai_api_key="sk-test"))
    app.dependency_overrides[get_upstream] = lambda: BrokenUpstream()
    client = TestClient(app)
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error", "details": {"message": "boom"}}
    assert "x-request-id" in r.headers

    metrics = client.get("/metrics").text
    assert 'upstream_requests_total{outcome="error"}' in metrics


def test_upstream_that_never_answers_returns_503(silent_upstream, monkeypatch):
    for name in ["HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY"]:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)
    upstream = OpenAIChatClient(base_url=silent_upstream, timeout_seconds=0.3)
    client = TestClient(
        create_app(RelaySettings(openai_api_key="sk-test"), upstream=upstream)
    )

    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 503
    assert r.json() == {
        "error": "Service unavailable",
        "details": {"message": "No response received from API"},
    }


@pytest.mark.parametrize("status", [301, 302, 307])
def test_upstream_redirect_is_reported_as_bad_gateway(status):
    client = build_client(
        lambda request: httpx.Response(
            status, headers={"location": "http://elsewhere.test/"}
        )
    )
    r = client.post("/api/chat", json=valid_payload)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "API error"
    assert body["details"]["status"] == status
