"""Thin async client for the Gemini generative-language REST API.

Only the two endpoints the functions need are wrapped: ``generateContent``
for summaries and ``embedContent`` for search queries. HTTP failures are
mapped onto the error taxonomy in ``errors.py`` so callers never handle
``httpx`` exceptions directly.
"""

import logging
from typing import Any

import httpx

from ..config import DEFAULT_GENAI_BASE_URL
from ..errors import UpstreamRateLimitedError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

# Generation parameters accepted by ``generate_content`` and their wire names.
GENERATION_CONFIG_KEYS = {
    "temperature": "temperature",
    "max_output_tokens": "maxOutputTokens",
    "top_p": "topP",
}


def build_generation_config(config: dict[str, Any]) -> dict[str, Any]:
    """Translate a generation config bag into the REST ``generationConfig`` body.

    Unrecognised keys are dropped with a warning.
    """
    body: dict[str, Any] = {}
    for key, value in config.items():
        if key in GENERATION_CONFIG_KEYS:
            body[GENERATION_CONFIG_KEYS[key]] = value
        elif key == "thinking_budget":
            body["thinkingConfig"] = {"thinkingBudget": value}
        else:
            logger.warning("Ignoring unknown generation parameter %s", key)
    return body


def extract_text(response: dict[str, Any]) -> str:
    """Return generated text from either response shape, or ``""``."""
    text = response.get("text")
    if isinstance(text, str) and text:
        return text
    try:
        text = response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


def extract_embedding(response: dict[str, Any]) -> list[float]:
    """Return the embedding values from an ``embedContent`` response, or ``[]``."""
    embedding = response.get("embedding")
    if not isinstance(embedding, dict):
        embeddings = response.get("embeddings") or []
        embedding = embeddings[0] if embeddings else {}
    values = embedding.get("values") if isinstance(embedding, dict) else None
    return list(values) if values else []


class GenAIClient:
    """Async wrapper over the Gemini REST endpoints.

    Parameters
    ----------
    api_key:
        Gemini API key, sent as ``x-goog-api-key``.
    http:
        Optional ``httpx.AsyncClient`` to reuse; one is created otherwise.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_GENAI_BASE_URL,
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{path}"
        headers = {"x-goog-api-key": self._api_key or ""}
        try:
            resp = await self._http.post(url, json=body, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 429:
                raise UpstreamRateLimitedError("Gemini API rate limit exceeded") from exc
            raise UpstreamUnavailableError(
                f"Gemini API returned {status}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Gemini API request failed: {exc}") from exc
        return resp.json()

    async def generate_content(
        self,
        model: str,
        prompt: str,
        config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call ``models/{model}:generateContent`` with a single user turn."""
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": build_generation_config(config or {}),
        }
        return await self._post(f"models/{model}:generateContent", body)

    async def embed_content(
        self,
        model: str,
        text: str,
        output_dimensionality: int | None = None,
    ) -> list[float]:
        """Call ``models/{model}:embedContent`` and return the vector."""
        body: dict[str, Any] = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": text}]},
        }
        if output_dimensionality is not None:
            body["outputDimensionality"] = output_dimensionality
        resp = await self._post(f"models/{model}:embedContent", body)
        return extract_embedding(resp)
