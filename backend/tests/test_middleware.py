import json

import pytest

from app.api.middleware import RequestSizeLimitMiddleware


def http_scope(content_length: int | None = None) -> dict:
    headers = []
    if content_length is not None:
        headers.append((b"content-length", str(content_length).encode()))
    return {"type": "http", "method": "POST", "path": "/api/upload", "headers": headers}


@pytest.mark.asyncio
async def test_declared_length_over_limit_is_rejected_before_reading():
    reads = 0

    async def receive():
        nonlocal reads
        reads += 1
        return {"type": "http.request", "body": b"x" * 32, "more_body": False}

    async def app(scope, receive, send):
        raise AssertionError("request should not reach the app")

    sent = []

    async def send(message):
        sent.append(message)

    await RequestSizeLimitMiddleware(app, max_size=16)(http_scope(32), receive, send)

    assert reads == 0
    assert sent[0]["status"] == 413
    assert json.loads(sent[1]["body"]) == {
        "success": False,
        "error": "Request body exceeds the maximum size of 16 bytes",
    }


@pytest.mark.asyncio
async def test_body_within_limit_passes_through():
    chunks = [b"a" * 8, b"b" * 8]

    async def receive():
        body = chunks.pop(0)
        return {"type": "http.request", "body": body, "more_body": bool(chunks)}

    seen = []

    async def app(scope, receive, send):
        while True:
            message = await receive()
            seen.append(message["body"])
            if not message["more_body"]:
                break

    async def send(message):
        pass

    await RequestSizeLimitMiddleware(app, max_size=16)(http_scope(), receive, send)

    assert seen == [b"a" * 8, b"b" * 8]
