"""Tests for the raw ASGI middlewares (request id, body size limit)."""

import json

import pytest

from app.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware
from app.middleware.request_id import get_header, sanitize_request_id


async def echo_app(scope, receive, send) -> None:
    """Respond 200 with the full request body."""
    body = b""
    while True:
        message = await receive()
        body += message.get("body", b"")
        if not message.get("more_body", False):
            break
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": body})


async def call(app, scope: dict, chunks: list[bytes]) -> tuple[int, dict, bytes]:
    pending = list(chunks)

    async def receive() -> dict:
        body = pending.pop(0) if pending else b""
        return {"type": "http.request", "body": body, "more_body": bool(pending)}

    sent: list[dict] = []

    async def send(message: dict) -> None:
        sent.append(message)

    await app(scope, receive, send)
    start = sent[0]
    headers = {k.decode(): v.decode() for k, v in start.get("headers", [])}
    body = b"".join(m.get("body", b"") for m in sent[1:])
    return start["status"], headers, body


def http_scope(method: str = "POST", headers: list[tuple[bytes, bytes]] | None = None) -> dict:
    return {"type": "http", "method": method, "path": "/fs/a.txt", "headers": headers or []}


class TestRequestSizeLimit:
    async def test_small_chunked_body_is_replayed(self) -> None:
        app = RequestSizeLimitMiddleware(echo_app, max_bytes=10)
        status, _, body = await call(app, http_scope(), [b"abc", b"def"])
        assert status == 200
        assert body == b"abcdef"

    async def test_large_chunked_body_rejected(self) -> None:
        app = RequestSizeLimitMiddleware(echo_app, max_bytes=5)
        status, headers, body = await call(app, http_scope(), [b"abc", b"def"])
        assert status == 413
        assert headers["content-type"] == "application/json"
        payload = json.loads(body)
        assert payload["error"] == "PAYLOAD_TOO_LARGE"
        assert payload["details"] == {"max_bytes": 5, "content_length": 6}

    async def test_declared_length_over_limit_rejected(self) -> None:
        app = RequestSizeLimitMiddleware(echo_app, max_bytes=5)
        scope = http_scope(headers=[(b"content-length", b"100")])
        status, _, _ = await call(app, scope, [b"x"])
        assert status == 413

    async def test_get_requests_pass_through(self) -> None:
        app = RequestSizeLimitMiddleware(echo_app, max_bytes=1)
        status, _, body = await call(app, http_scope("GET"), [b"ignored"])
        assert status == 200
        assert body == b"ignored"


class TestRequestID:
    async def test_generated_when_missing(self) -> None:
        app = RequestIDMiddleware(echo_app)
        _, headers, _ = await call(app, http_scope("GET"), [])
        assert len(headers["X-Request-ID"]) == 36

    async def test_forwarded_when_safe(self) -> None:
        app = RequestIDMiddleware(echo_app, header_name="X-Trace")
        scope = http_scope("GET", headers=[(b"x-trace", b"abc-123")])
        _, headers, _ = await call(app, scope, [])
        assert headers["X-Trace"] == "abc-123"
        assert scope["state"]["request_id"] == "abc-123"

    @pytest.mark.parametrize("raw", [None, "", "has space", "x" * 65, "semi;colon"])
    def test_unsafe_values_replaced(self, raw: str | None) -> None:
        assert sanitize_request_id(raw) != raw

    def test_get_header_case_insensitive(self) -> None:
        scope = http_scope(headers=[(b"Content-Type", b"text/plain")])
        assert get_header(scope, "content-type") == "text/plain"
        assert get_header(scope, "x-missing") is None
