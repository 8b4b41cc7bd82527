from __future__ import annotations

from typing import Any

import httpx

from career_tools.ai.types import GenerationParams, ProviderError


class GeminiProvider:
    """Google Generative Language `generateContent` over plain HTTPS."""

    def __init__(
        self,
        model: str,
        api_key: str | None,
        base_url: str,
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._model = model
        self._api_key = (api_key or "").strip()
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    def _body(self, prompt: str, params: GenerationParams) -> dict[str, Any]:
        config: dict[str, Any] = {
            "temperature": params.temperature,
            "maxOutputTokens": params.max_output_tokens,
        }
        if params.top_k is not None:
            config["topK"] = params.top_k
        if params.top_p is not None:
            config["topP"] = params.top_p
        if params.output_format == "json":
            config["responseMimeType"] = "application/json"
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": config,
        }

    async def complete(self, prompt: str, params: GenerationParams) -> str:
        if not self._api_key:
            raise ProviderError("GEMINI_API_KEY is not configured")

        try:
            response = await self._client.post(
                self._url,
                headers={"x-goog-api-key": self._api_key},
                json=self._body(prompt, params),
            )
        except httpx.TimeoutException as exc:
            raise ProviderError("Gemini request timed out", transient=True) from exc
        except httpx.TransportError as exc:
            raise ProviderError(f"Gemini connection failed: {type(exc).__name__}", transient=True) from exc

        if response.status_code >= 400:
            raise ProviderError(
                f"Gemini returned HTTP {response.status_code}",
                status_code=response.status_code,
                transient=response.status_code >= 500,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Gemini returned a non-JSON body", transient=True) from exc

        text = _first_candidate_text(data)
        if not text:
            raise ProviderError("Gemini returned no candidate text", transient=True)
        return text

    async def aclose(self) -> None:
        await self._client.aclose()


def _first_candidate_text(data: Any) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    texts = [part.get("text", "") for part in parts if isinstance(part, dict)]
    return "".join(text for text in texts if isinstance(text, str)).strip()
