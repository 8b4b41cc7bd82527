from __future__ import annotations

import asyncio
import logging
import time

from career_tools.ai.types import AIClient, GenerationParams, ProviderError
from career_tools.generation.errors import UpstreamError
from career_tools.generation.prompts import GENERATION_PARAMS
from career_tools.generation.types import ToolKind

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class GenerationClient:
    """Calls the completion provider with a hard timeout and a single retry.

    Only lengths, latencies and status codes are logged; prompt and
    completion text never leave this call.
    """

    def __init__(self, ai_client: AIClient, timeout_s: float = 15.0):
        self._ai_client = ai_client
        self._timeout_s = timeout_s

    async def _attempt(self, prompt: str, params: GenerationParams) -> str:
        try:
            return await asyncio.wait_for(self._ai_client.complete(prompt, params), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise ProviderError(f"No response within {self._timeout_s:g}s", transient=True) from exc

    async def generate(self, prompt: str, tool: ToolKind) -> str:
        params = GENERATION_PARAMS[tool]
        last_error: ProviderError | None = None

        for attempt in range(1, MAX_ATTEMPTS + 1):
            started = time.perf_counter()
            try:
                text = await self._attempt(prompt, params)
            except ProviderError as exc:
                latency_ms = int((time.perf_counter() - started) * 1000)
                logger.warning(
                    "generation_upstream_failed tool=%s attempt=%s status=%s transient=%s latency_ms=%s: %s",
                    tool.value,
                    attempt,
                    exc.status_code,
                    exc.transient,
                    latency_ms,
                    exc,
                )
                if exc.is_rate_limit:
                    raise UpstreamError(
                        "The AI service is receiving too many requests right now. "
                        "Please try again in a few minutes.",
                        transient=False,
                        is_provider_rate_limit=True,
                        status_code=exc.status_code,
                    ) from exc
                if not exc.transient:
                    raise UpstreamError(
                        "The AI service could not process this request. Please try again later.",
                        transient=False,
                        status_code=exc.status_code,
                    ) from exc
                last_error = exc
                continue

            logger.info(
                "generation_completed tool=%s attempt=%s prompt_len=%s output_len=%s latency_ms=%s",
                tool.value,
                attempt,
                len(prompt),
                len(text),
                int((time.perf_counter() - started) * 1000),
            )
            return text

        raise UpstreamError(
            "The AI service is temporarily unavailable. Please try again shortly.",
            transient=True,
            status_code=last_error.status_code if last_error else None,
        ) from last_error
