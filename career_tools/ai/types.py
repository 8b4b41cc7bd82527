from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_output_tokens: int
    top_k: int | None = None
    top_p: float | None = None
    output_format: OutputFormat = "text"


class ProviderError(RuntimeError):
    """A failed completion call, classified for the retry policy."""

    def __init__(self, message: str, *, status_code: int | None = None, transient: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient

    @property
    def is_rate_limit(self) -> bool:
        return self.status_code == 429


class AIClient(Protocol):
    async def complete(self, prompt: str, params: GenerationParams) -> str: ...

    async def aclose(self) -> None: ...
