from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    trust_proxy_headers: bool
    quota_backend: str
    quota_db_path: str
    quota_window_seconds: int
    quota_purge_interval_seconds: int
    cover_letter_quota: int
    cover_letter_burst_limit: int
    cover_letter_burst_window_seconds: int
    cover_letter_minute_limit: int
    salary_analyzer_quota: int
    salary_analyzer_burst_limit: int
    salary_analyzer_burst_window_seconds: int
    salary_analyzer_minute_limit: int
    leadership_quota: int
    leadership_burst_limit: int
    leadership_burst_window_seconds: int
    leadership_minute_limit: int
    max_request_bytes: int
    ai_provider: str
    ai_model: str
    gemini_api_key: str | None
    gemini_base_url: str
    openai_api_key: str | None
    openai_base_url: str | None
    generation_timeout_s: float


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "https://prosumely.com",
            "https://www.prosumely.com",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    trust_proxy_headers=_get_env_bool("TRUST_PROXY_HEADERS", True),
    quota_backend=(_get_env("QUOTA_BACKEND", "memory") or "memory").strip().lower(),
    quota_db_path=_get_env("QUOTA_DB_PATH", "data/quota.db") or "data/quota.db",
    quota_window_seconds=_get_env_int("QUOTA_WINDOW_SECONDS", 3600),
    quota_purge_interval_seconds=_get_env_int("QUOTA_PURGE_INTERVAL_SECONDS", 900),
    cover_letter_quota=_get_env_int("COVER_LETTER_QUOTA", 3),
    cover_letter_burst_limit=_get_env_int("COVER_LETTER_BURST_LIMIT", 1),
    cover_letter_burst_window_seconds=_get_env_int("COVER_LETTER_BURST_WINDOW_SECONDS", 20),
    cover_letter_minute_limit=_get_env_int("COVER_LETTER_MINUTE_LIMIT", 2),
    salary_analyzer_quota=_get_env_int("SALARY_ANALYZER_QUOTA", 4),
    salary_analyzer_burst_limit=_get_env_int("SALARY_ANALYZER_BURST_LIMIT", 2),
    salary_analyzer_burst_window_seconds=_get_env_int("SALARY_ANALYZER_BURST_WINDOW_SECONDS", 10),
    salary_analyzer_minute_limit=_get_env_int("SALARY_ANALYZER_MINUTE_LIMIT", 10),
    leadership_quota=_get_env_int("LEADERSHIP_QUOTA", 4),
    leadership_burst_limit=_get_env_int("LEADERSHIP_BURST_LIMIT", 2),
    leadership_burst_window_seconds=_get_env_int("LEADERSHIP_BURST_WINDOW_SECONDS", 10),
    leadership_minute_limit=_get_env_int("LEADERSHIP_MINUTE_LIMIT", 10),
    max_request_bytes=_get_env_int("MAX_REQUEST_BYTES", 50000),
    ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
    ai_model=(_get_env("AI_MODEL", "gemini-2.5-flash-lite") or "gemini-2.5-flash-lite").strip(),
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    gemini_base_url=_get_env(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ) or "https://generativelanguage.googleapis.com/v1beta",
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_base_url=_get_env("OPENAI_BASE_URL"),
    generation_timeout_s=_get_env_float("GENERATION_TIMEOUT_S", 15.0),
)

if settings.quota_backend not in {"memory", "sqlite"}:
    raise RuntimeError("QUOTA_BACKEND must be either 'memory' or 'sqlite'.")

if settings.ai_provider not in {"gemini", "openai"}:
    raise RuntimeError("AI_PROVIDER must be either 'gemini' or 'openai'.")
