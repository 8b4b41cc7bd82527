from __future__ import annotations

from typing import Any, Optional

import httpx
import openai
from openai import AsyncOpenAI

from career_tools.ai.types import GenerationParams, ProviderError


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._model = model
        self._api_key = (api_key or "").strip()
        self._client: AsyncOpenAI | None = None
        if self._api_key:
            # Retries are owned by the generation pipeline, not the SDK.
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=base_url or None,
                timeout=timeout_s,
                max_retries=0,
                http_client=http_client,
            )

    async def complete(self, prompt: str, params: GenerationParams) -> str:
        if self._client is None:
            raise ProviderError("OPENAI_API_KEY is not configured")

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": params.temperature,
            "max_tokens": params.max_output_tokens,
        }
        if params.top_p is not None:
            create_kwargs["top_p"] = params.top_p
        if params.output_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except openai.APITimeoutError as exc:
            raise ProviderError("OpenAI request timed out", transient=True) from exc
        except openai.APIConnectionError as exc:
            raise ProviderError("OpenAI connection failed", transient=True) from exc
        except openai.APIStatusError as exc:
            raise ProviderError(
                f"OpenAI returned HTTP {exc.status_code}",
                status_code=exc.status_code,
                transient=exc.status_code >= 500,
            ) from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            raise ProviderError("OpenAI returned an empty completion", transient=True)
        return content.strip()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
