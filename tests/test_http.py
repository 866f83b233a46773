"""Gemini client against httpx.MockTransport."""

import json

import httpx
import pytest

from zensoul.errors import OracleError
from zensoul.transport.http import DEFAULT_MODEL, GeminiClient


def make_client(handler) -> GeminiClient:
    return GeminiClient(api_key="test-key", transport=httpx.MockTransport(handler))


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.mark.asyncio
async def test_generate_returns_first_candidate_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("X-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_body("Breathe slowly."))

    client = make_client(handler)
    assert await client.generate("help me relax") == "Breathe slowly."
    await client.close()

    assert seen["url"] == f"https://generativelanguage.googleapis.com/v1beta/models/{DEFAULT_MODEL}:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"] == {"contents": [{"parts": [{"text": "help me relax"}]}]}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response, code",
    [
        (httpx.Response(500, text="boom"), "http_error"),
        (httpx.Response(200, json={"error": {"message": "quota exceeded"}}), "api_error"),
        (httpx.Response(200, json={"candidates": []}), "empty_response"),
        (httpx.Response(200, json=gemini_body("   ")), "empty_response"),
        (httpx.Response(200, text="<html>"), "bad_response"),
    ],
)
async def test_generate_failures_raise_oracle_error(response, code):
    client = make_client(lambda request: response)
    with pytest.raises(OracleError) as exc:
        await client.generate("hi")
    assert exc.value.code == code
    await client.close()


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    client = make_client(handler)
    with pytest.raises(OracleError) as exc:
        await client.generate("hi")
    assert exc.value.code == "transport_error"
    await client.close()


def test_api_key_required():
    with pytest.raises(OracleError) as exc:
        GeminiClient(api_key="")
    assert exc.value.code == "missing_api_key"
