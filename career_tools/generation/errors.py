from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    RATE_LIMIT = "RATE_LIMIT"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    PARSE_FAILURE = "PARSE_FAILURE"


class PipelineError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(PipelineError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, constraint: str, message: str):
        super().__init__(message)
        self.field = field
        self.constraint = constraint


class QuotaExceededError(PipelineError):
    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str, *, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamError(PipelineError):
    kind = ErrorKind.UPSTREAM_FAILURE

    def __init__(
        self,
        message: str,
        *,
        transient: bool,
        is_provider_rate_limit: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.transient = transient
        self.is_provider_rate_limit = is_provider_rate_limit
        self.status_code = status_code


class ResponseParseError(PipelineError):
    kind = ErrorKind.PARSE_FAILURE

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ErrorResponse:
    kind: ErrorKind
    message: str
    retry_after: int | None = None
    field: str | None = None
    is_provider_rate_limit: bool = False

    @classmethod
    def from_error(cls, exc: PipelineError) -> "ErrorResponse":
        if isinstance(exc, QuotaExceededError):
            return cls(kind=exc.kind, message=exc.message, retry_after=exc.retry_after)
        if isinstance(exc, InputValidationError):
            return cls(kind=exc.kind, message=exc.message, field=exc.field)
        if isinstance(exc, UpstreamError):
            return cls(kind=exc.kind, message=exc.message, is_provider_rate_limit=exc.is_provider_rate_limit)
        return cls(kind=exc.kind, message=exc.message)
