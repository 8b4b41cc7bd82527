from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from career_tools.core.quota import FREE_TIER, QuotaDecision, QuotaStore, QuotaTier
from career_tools.generation import prompts
from career_tools.generation.client import GenerationClient
from career_tools.generation.enrichment import enrich
from career_tools.generation.errors import (
    ErrorKind,
    ErrorResponse,
    PipelineError,
    QuotaExceededError,
)
from career_tools.generation.parsing import parse_for_tool
from career_tools.generation.types import PipelineState, ToolKind
from career_tools.generation.validation import INPUT_SCHEMAS, InputSchema, validate

logger = logging.getLogger(__name__)

Validator = Callable[[Any, InputSchema], dict[str, Any]]
PromptBuilder = Callable[[dict[str, Any], ToolKind], str]
Parser = Callable[[str, ToolKind], dict[str, Any]]


@dataclass
class PipelineOutcome:
    """Terminal result of one request: exactly one of `result` or `error` is set."""

    tool: ToolKind
    state: PipelineState = PipelineState.RECEIVED
    result: dict[str, Any] | None = None
    error: ErrorResponse | None = None
    quota: QuotaDecision | None = None
    trace: list[PipelineState] = field(default_factory=lambda: [PipelineState.RECEIVED])

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.trace.append(state)

    def fail(self, error: ErrorResponse) -> "PipelineOutcome":
        self.result = None
        self.error = error
        self.advance(PipelineState.FAILED)
        return self


def _window_label(window_seconds: int) -> str:
    if window_seconds % 3600 == 0:
        hours = window_seconds // 3600
        return "hour" if hours == 1 else f"{hours} hours"
    if window_seconds % 60 == 0:
        minutes = window_seconds // 60
        return "minute" if minutes == 1 else f"{minutes} minutes"
    return f"{window_seconds} seconds"


def _wait_label(seconds: int) -> str:
    if seconds < 60:
        return "1 second" if seconds == 1 else f"{seconds} seconds"
    minutes = math.ceil(seconds / 60)
    return "1 minute" if minutes == 1 else f"{minutes} minutes"


def rate_limit_message(decision: QuotaDecision) -> str:
    wait = _wait_label(decision.retry_after_seconds or 1)
    window = _window_label(decision.window_seconds)
    if decision.tier == FREE_TIER:
        return (
            f"You have used all {decision.limit} free requests per {window} for this tool. "
            f"Please wait {wait} and try again."
        )
    return (
        f"Rate limit exceeded for the {decision.tier} tier "
        f"({decision.limit} {'request' if decision.limit == 1 else 'requests'} per {window}). "
        f"Please wait {wait} and try again."
    )


class RequestHandler:
    """Runs one tool request through quota, validation, prompt, generation and parsing.

    Every stage failure is converted into an `ErrorResponse` here; callers
    only ever see a `PipelineOutcome`. Quota is charged before the network
    call and is not refunded if the request is later abandoned.
    """

    def __init__(
        self,
        tool: ToolKind,
        *,
        route: str,
        quota_store: QuotaStore,
        generation_client: GenerationClient,
        tiers: Sequence[QuotaTier],
        validator: Validator = validate,
        prompt_builder: PromptBuilder = prompts.build,
        parser: Parser = parse_for_tool,
    ):
        self.tool = tool
        self.route = route
        self.tiers = tuple(tiers)
        self._quota_store = quota_store
        self._generation_client = generation_client
        self._validate = validator
        self._build_prompt = prompt_builder
        self._parse = parser
        self._input_schema = INPUT_SCHEMAS[tool]

    async def handle(self, identity: str, payload: Any) -> PipelineOutcome:
        outcome = PipelineOutcome(tool=self.tool)
        try:
            decision = self._quota_store.check_and_increment(identity, self.route, self.tiers)
            outcome.quota = decision
            if not decision.allowed:
                raise QuotaExceededError(
                    rate_limit_message(decision),
                    retry_after=decision.retry_after_seconds or 1,
                )
            outcome.advance(PipelineState.QUOTA_CHECKED)

            validated = self._validate(payload, self._input_schema)
            outcome.advance(PipelineState.VALIDATED)

            prompt = self._build_prompt(validated, self.tool)
            outcome.advance(PipelineState.PROMPTED)

            raw = await self._generation_client.generate(prompt, self.tool)
            outcome.advance(PipelineState.GENERATED)

            result = enrich(self._parse(raw, self.tool), validated, self.tool)
            outcome.advance(PipelineState.PARSED)
        except PipelineError as exc:
            logger.info(
                "generation_request_failed tool=%s stage=%s kind=%s",
                self.tool.value,
                outcome.state.value,
                exc.kind.value,
            )
            return outcome.fail(ErrorResponse.from_error(exc))
        except Exception:
            logger.exception("generation_request_crashed tool=%s stage=%s", self.tool.value, outcome.state.value)
            return outcome.fail(
                ErrorResponse(
                    kind=ErrorKind.UPSTREAM_FAILURE,
                    message="Something went wrong while generating your result. Please try again.",
                )
            )

        outcome.result = result
        outcome.advance(PipelineState.RESPONDED)
        return outcome
