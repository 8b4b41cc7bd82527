from functools import lru_cache

from career_tools.ai.config import load_ai_config
from career_tools.ai.types import AIClient

from career_tools.ai.providers.gemini_provider import GeminiProvider
from career_tools.ai.providers.openai_provider import OpenAIProvider


@lru_cache(maxsize=1)
def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url or "",
            timeout_s=cfg.timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")


async def close_ai_client() -> None:
    if get_ai_client.cache_info().currsize:
        await get_ai_client().aclose()
        get_ai_client.cache_clear()
