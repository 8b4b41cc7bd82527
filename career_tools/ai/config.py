from dataclasses import dataclass

from career_tools.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float


def load_ai_config() -> AIConfig:
    if settings.ai_provider == "openai":
        return AIConfig(
            provider="openai",
            model=settings.ai_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout_s=settings.generation_timeout_s,
        )
    return AIConfig(
        provider="gemini",
        model=settings.ai_model,
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout_s=settings.generation_timeout_s,
    )
