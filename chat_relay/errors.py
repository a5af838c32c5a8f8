from typing import Any, Dict, Optional, Union

Details = Union[str, Dict[str, Any]]


class RelayError(Exception):
    """Base class for failures the relay reports to the client.

    Each subclass maps to exactly one HTTP status and renders the uniform
    ``{"error": ..., "details": ...}`` body.
    """

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, details: Details = "", error: Optional[str] = None):
        if error is not None:
            self.error = error
        self.details = details
        super().__init__(self.error)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details}


class InvalidChatRequestError(RelayError):
    """Raised when the request body does not carry a messages array."""

    status_code = 400
    error = "Invalid message format"

    def __init__(self, details: Details = "Messages must be an array"):
        super().__init__(details)


class ConfigurationError(RelayError):
    """Raised when the server-held API key is not configured."""

    status_code = 500
    error = "Server configuration error"

    def __init__(self, details: Details = "API key is not configured"):
        super().__init__(details)


class UpstreamError(RelayError):
    """Raised when the upstream API answered with a non-success status.

    The client-facing status mirrors upstream 4xx and 5xx statuses. Anything
    else (1xx, an unfollowed 3xx) is reported as 502. ``details.status``
    always carries the upstream status. The upstream error message, when
    present, becomes the summary.
    """

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code if 400 <= status_code < 600 else 502
        self.upstream_status = status_code
        self.body = body
        super().__init__(
            {"status": status_code, "data": body},
            error=extract_error_message(body) or "API error",
        )


class UpstreamUnavailableError(RelayError):
    """Raised when the request was sent but no response came back."""

    status_code = 503
    error = "Service unavailable"

    def __init__(self, details: Optional[Details] = None):
        super().__init__(details or {"message": "No response received from API"})


class InternalRelayError(RelayError):
    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str):
        super().__init__({"message": message})


def extract_error_message(body: Any) -> Optional[str]:
    # OpenAI shape: {"error": {"message": "..."}}
    if not isinstance(body, dict):
        return None
    err = body.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        if message:
            return str(message)
    return None
