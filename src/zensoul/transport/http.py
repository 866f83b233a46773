"""
Gemini REST client — the text-completion oracle behind recommendations,
guided-exercise feedback and affirmations.

Contract is deliberately thin: send a prompt, receive text or raise OracleError.
"""

from typing import Any, Optional, Protocol

import httpx

from zensoul.errors import OracleError

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"


class TextOracle(Protocol):
    async def generate(self, prompt: str) -> str: ...


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise OracleError("Gemini API key is required", code="missing_api_key")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "zensoul/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "X-goog-api-key": self._api_key}

    @staticmethod
    def _unwrap(json_data: Any) -> str:
        """Pull candidates[0].content.parts[0].text out of a generateContent response."""
        if isinstance(json_data, dict) and json_data.get("error"):
            error = json_data["error"]
            message = error.get("message", "Unknown API error") if isinstance(error, dict) else str(error)
            raise OracleError(f"Gemini error: {message}", code="api_error", details={"error": error})
        try:
            text = json_data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise OracleError("No response text available", code="empty_response")
        if not isinstance(text, str) or not text.strip():
            raise OracleError("No response text available", code="empty_response")
        return text

    async def generate(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = await self._client.post(
                f"/v1beta/models/{self._model}:generateContent",
                json=body,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise OracleError(f"Gemini request failed: {e}", code="transport_error")
        if resp.status_code >= 400:
            raise OracleError(f"HTTP {resp.status_code}: {resp.text[:200]}", code="http_error")
        try:
            data = resp.json()
        except ValueError:
            raise OracleError("Gemini returned a non-JSON body", code="bad_response")
        return self._unwrap(data)

    async def close(self) -> None:
        await self._client.aclose()
