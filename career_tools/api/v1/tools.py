import json
import time
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from career_tools.ai.factory import get_ai_client
from career_tools.core.config import settings
from career_tools.core.identity import client_key
from career_tools.core.quota import QuotaDecision, QuotaStore, QuotaTier, build_tiers, get_quota_store
from career_tools.generation.client import GenerationClient
from career_tools.generation.errors import ErrorKind, ErrorResponse, InputValidationError
from career_tools.generation.handler import RequestHandler
from career_tools.generation.types import ToolKind
from career_tools.schemas.tools import (
    CoverLetterResult,
    ErrorBody,
    LeadershipAssessment,
    SalaryAnalysis,
)

router = APIRouter()

COVER_LETTER_ROUTE = "/cover-letter-generate"
SALARY_ANALYZER_ROUTE = "/salary-analyzer"
LEADERSHIP_ROUTE = "/leadership-readiness-score"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorBody},
    429: {"model": ErrorBody},
    502: {"model": ErrorBody},
}


def _tool_tiers(tool: ToolKind) -> tuple[QuotaTier, ...]:
    if tool is ToolKind.COVER_LETTER:
        return build_tiers(
            burst_limit=settings.cover_letter_burst_limit,
            burst_window_seconds=settings.cover_letter_burst_window_seconds,
            minute_limit=settings.cover_letter_minute_limit,
            free_limit=settings.cover_letter_quota,
        )
    if tool is ToolKind.SALARY_ANALYSIS:
        return build_tiers(
            burst_limit=settings.salary_analyzer_burst_limit,
            burst_window_seconds=settings.salary_analyzer_burst_window_seconds,
            minute_limit=settings.salary_analyzer_minute_limit,
            free_limit=settings.salary_analyzer_quota,
        )
    return build_tiers(
        burst_limit=settings.leadership_burst_limit,
        burst_window_seconds=settings.leadership_burst_window_seconds,
        minute_limit=settings.leadership_minute_limit,
        free_limit=settings.leadership_quota,
    )


def get_generation_client() -> GenerationClient:
    return GenerationClient(get_ai_client(), timeout_s=settings.generation_timeout_s)


def _quota_headers(decision: QuotaDecision | None) -> dict[str, str]:
    if decision is None:
        return {}
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": decision.reset_at_iso,
    }
    if not decision.allowed and decision.retry_after_seconds:
        headers["Retry-After"] = str(decision.retry_after_seconds)
    return headers


def _processing_time(started: float) -> dict[str, str]:
    return {"X-Processing-Time": str(int((time.perf_counter() - started) * 1000))}


def _error_status(error: ErrorResponse) -> tuple[int, str]:
    if error.kind is ErrorKind.VALIDATION:
        return status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"
    if error.kind is ErrorKind.RATE_LIMIT:
        return status.HTTP_429_TOO_MANY_REQUESTS, "RATE_LIMIT_EXCEEDED"
    if error.kind is ErrorKind.PARSE_FAILURE:
        return status.HTTP_502_BAD_GATEWAY, "PARSE_ERROR"
    if error.is_provider_rate_limit:
        return status.HTTP_429_TOO_MANY_REQUESTS, "UPSTREAM_ERROR"
    return status.HTTP_502_BAD_GATEWAY, "UPSTREAM_ERROR"


def _error_response(error: ErrorResponse, headers: dict[str, str]) -> JSONResponse:
    status_code, code = _error_status(error)
    body = ErrorBody(error=code, message=error.message, retryAfter=error.retry_after, field=error.field)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _body_too_large(size: int | None = None) -> InputValidationError:
    limit = settings.max_request_bytes
    received = f" (received {size:,})" if size is not None else ""
    return InputValidationError(
        field="body",
        constraint="max_bytes",
        message=f"Request body must be at most {limit:,} bytes{received}.",
    )


async def _read_body(request: Request) -> bytes:
    limit = settings.max_request_bytes
    declared = request.headers.get("content-length", "").strip()
    if declared.isdigit() and int(declared) > limit:
        raise _body_too_large(int(declared))

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise _body_too_large()
    return bytes(body)


def _decode_payload(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return None


async def _run_tool(
    tool: ToolKind,
    route: str,
    request: Request,
    response: Response,
    quota_store: QuotaStore,
    generation_client: GenerationClient,
):
    started = time.perf_counter()
    try:
        body = await _read_body(request)
    except InputValidationError as exc:
        # Oversized bodies are refused before quota is charged or JSON is parsed.
        return _error_response(ErrorResponse.from_error(exc), _processing_time(started))

    handler = RequestHandler(
        tool,
        route=route,
        quota_store=quota_store,
        generation_client=generation_client,
        tiers=_tool_tiers(tool),
    )
    outcome = await handler.handle(client_key(request), _decode_payload(body))

    headers = _quota_headers(outcome.quota)
    headers.update(_processing_time(started))
    if outcome.error is not None:
        return _error_response(outcome.error, headers)

    response.headers.update(headers)
    return outcome.result


@router.post(COVER_LETTER_ROUTE, response_model=CoverLetterResult, responses=ERROR_RESPONSES)
async def cover_letter_generate(
    request: Request,
    response: Response,
    quota_store: QuotaStore = Depends(get_quota_store),
    generation_client: GenerationClient = Depends(get_generation_client),
):
    return await _run_tool(ToolKind.COVER_LETTER, COVER_LETTER_ROUTE, request, response, quota_store, generation_client)


@router.post(SALARY_ANALYZER_ROUTE, response_model=SalaryAnalysis, responses=ERROR_RESPONSES)
async def salary_analyzer(
    request: Request,
    response: Response,
    quota_store: QuotaStore = Depends(get_quota_store),
    generation_client: GenerationClient = Depends(get_generation_client),
):
    return await _run_tool(
        ToolKind.SALARY_ANALYSIS, SALARY_ANALYZER_ROUTE, request, response, quota_store, generation_client
    )


@router.post(LEADERSHIP_ROUTE, response_model=LeadershipAssessment, responses=ERROR_RESPONSES)
async def leadership_readiness_score(
    request: Request,
    response: Response,
    quota_store: QuotaStore = Depends(get_quota_store),
    generation_client: GenerationClient = Depends(get_generation_client),
):
    return await _run_tool(ToolKind.LEADERSHIP, LEADERSHIP_ROUTE, request, response, quota_store, generation_client)
