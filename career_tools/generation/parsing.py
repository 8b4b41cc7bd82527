from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from career_tools.generation.errors import ResponseParseError
from career_tools.generation.types import ToolKind
from career_tools.generation.validation import word_count

_FENCE = re.compile(r"```(?:json|JSON)?\s*")


@dataclass(frozen=True)
class Num:
    required: bool = False
    min_value: float | None = None
    max_value: float | None = None
    integer: bool = False
    default: float = 0


@dataclass(frozen=True)
class Str:
    required: bool = False
    default: str = ""


@dataclass(frozen=True)
class Choice:
    choices: tuple[str, ...]
    required: bool = False
    default: str | None = None


@dataclass(frozen=True)
class Arr:
    item: "Node"
    required: bool = False
    non_empty: bool = False


@dataclass(frozen=True)
class Obj:
    fields: dict[str, "Node"] = field(default_factory=dict)
    required: bool = False


Node = Union[Num, Str, Choice, Arr, Obj]


@dataclass(frozen=True)
class ResultSchema:
    tool: ToolKind
    root: Obj
    finalize: Callable[[dict[str, Any]], dict[str, Any]] | None = None


class _Invalid(Exception):
    """Value present but unusable for its node."""


def _path(parent: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}" if parent else key


def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


def _number(node: Num, value: Any) -> float | int:
    if isinstance(value, bool):
        raise _Invalid
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").rstrip("%").strip()
        try:
            value = float(cleaned)
        except ValueError as exc:
            raise _Invalid from exc
    if not isinstance(value, (int, float)):
        raise _Invalid
    try:
        number = float(value)
    except OverflowError as exc:
        # JSON integers are unbounded; anything past float range is unusable.
        raise _Invalid from exc
    if math.isnan(number) or math.isinf(number):
        raise _Invalid
    number = _clamp(number, node.min_value, node.max_value)
    if node.integer:
        return int(round(number))
    return int(number) if number.is_integer() else number


def _default(node: Node) -> Any:
    if isinstance(node, Num):
        number = _clamp(float(node.default), node.min_value, node.max_value)
        return int(number) if number.is_integer() else number
    if isinstance(node, Str):
        return node.default
    if isinstance(node, Choice):
        return node.default if node.default is not None else node.choices[0]
    if isinstance(node, Arr):
        return []
    return {key: _default(child) for key, child in node.fields.items()}


def _coerce(node: Node, value: Any, path: str) -> Any:
    if value is None:
        if node.required or (isinstance(node, Arr) and node.non_empty):
            raise ResponseParseError(f"The AI response is missing required field '{path}'.", path=path)
        return _default(node)

    try:
        return _coerce_present(node, value, path)
    except _Invalid:
        if node.required:
            raise ResponseParseError(f"The AI response has an invalid value for '{path}'.", path=path) from None
        return _default(node)


def _coerce_present(node: Node, value: Any, path: str) -> Any:
    if isinstance(node, Num):
        return _number(node, value)

    if isinstance(node, Str):
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise _Invalid
        return str(value).strip()

    if isinstance(node, Choice):
        if not isinstance(value, str):
            raise _Invalid
        lookup = {choice.lower(): choice for choice in node.choices}
        matched = lookup.get(value.strip().lower())
        if matched is None:
            raise _Invalid
        return matched

    if isinstance(node, Arr):
        if not isinstance(value, list):
            if node.non_empty:
                raise ResponseParseError(f"The AI response has no list for '{path}'.", path=path)
            raise _Invalid
        items = []
        for index, item in enumerate(value):
            try:
                items.append(_coerce_item(node.item, item, _path(path, index)))
            except (_Invalid, ResponseParseError):
                continue
        if node.non_empty and not items:
            raise ResponseParseError(f"The AI response has no entries for '{path}'.", path=path)
        return items

    if not isinstance(value, dict):
        raise _Invalid
    return {key: _coerce(child, value.get(key), _path(path, key)) for key, child in node.fields.items()}


def _coerce_item(node: Node, value: Any, path: str) -> Any:
    # Array entries are all-or-nothing: a broken entry is dropped, not defaulted.
    if value is None:
        raise _Invalid
    item = _coerce_present(node, value, path)
    if isinstance(item, str) and not item:
        raise _Invalid
    return item


def strip_fences(raw: str) -> str:
    return _FENCE.sub("", raw).replace("```", "").strip()


def extract_json_object(raw: str) -> dict[str, Any]:
    text = strip_fences(raw)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("The AI response did not contain JSON.") from None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            raise ResponseParseError("The AI response was not valid JSON.") from None
    if not isinstance(parsed, dict):
        raise ResponseParseError("The AI response was not a JSON object.")
    return parsed


def parse_cover_letter(raw: str) -> dict[str, Any]:
    letter = strip_fences(raw).replace("**", "").strip()
    if not letter:
        raise ResponseParseError("The AI returned an empty cover letter.")
    return {"coverLetter": letter, "wordCount": word_count(letter)}


def parse(raw: str, schema: ResultSchema) -> dict[str, Any]:
    """Turn raw model output into a result that matches `schema` exactly.

    Missing or mistyped required fields raise `ResponseParseError`; optional
    ones fall back to defaults. Numbers are clamped into their declared range.
    """
    payload = extract_json_object(raw)
    result = _coerce(schema.root, payload, "")
    if schema.finalize is not None:
        result = schema.finalize(result)
    return result


_MONEY = Num(required=True, min_value=0)
_AMOUNT = Num(min_value=0)

SALARY_RESULT = ResultSchema(
    tool=ToolKind.SALARY_ANALYSIS,
    root=Obj(
        required=True,
        fields={
            "salaryRange": Obj(
                required=True,
                fields={
                    "min": _MONEY,
                    "max": _MONEY,
                    "median": _MONEY,
                    "currency": Str(default="USD"),
                    "currencySymbol": Str(default="$"),
                },
            ),
            "percentiles": Obj(
                required=True,
                fields={key: _MONEY for key in ("p10", "p25", "p50", "p75", "p90")},
            ),
            "confidenceScore": Num(min_value=0, max_value=100, integer=True),
            "dataSampleSize": Num(min_value=0, integer=True),
            "salaryBreakdown": Obj(
                fields={key: _AMOUNT for key in ("baseSalary", "bonus", "stockOptions", "benefits", "total")},
            ),
            "yearOverYearGrowth": Arr(
                Obj(fields={"year": Num(required=True, integer=True), "growth": Num(required=True)})
            ),
            "countryComparisons": Arr(
                Obj(
                    fields={
                        "country": Str(required=True),
                        "salary": _MONEY,
                        "costOfLivingAdjusted": _AMOUNT,
                        "purchasingPower": Num(),
                        "flag": Str(),
                    }
                )
            ),
            "experienceImpact": Arr(
                Obj(fields={"years": Num(required=True, min_value=0, integer=True), "expectedSalary": _MONEY})
            ),
            "industryComparisons": Arr(
                Obj(
                    fields={
                        "industry": Str(required=True),
                        "avgSalary": _MONEY,
                        "difference": Num(),
                        "percentageDiff": Num(),
                    }
                )
            ),
            "costOfLivingAdjusted": Obj(
                fields={
                    "adjustedSalary": _AMOUNT,
                    "purchasingPowerRank": Num(min_value=1, max_value=10, integer=True, default=5),
                    "insights": Str(),
                }
            ),
            "negotiationInsights": Arr(
                Obj(
                    fields={
                        "category": Str(required=True),
                        "insights": Arr(Str()),
                        "priority": Choice(("high", "medium", "low"), default="medium"),
                    }
                )
            ),
            "marketInsights": Arr(Str()),
            "summary": Str(required=True),
        },
    ),
)

LEADERSHIP_CATEGORIES: dict[str, tuple[str, int]] = {
    "experience": ("Experience", 15),
    "currentRole": ("Current Role", 10),
    "teamSize": ("Team Management", 10),
    "leadershipSkills": ("Leadership Skills", 20),
    "softSkills": ("Soft Skills", 20),
    "achievements": ("Achievements", 15),
    "industry": ("Industry Fit", 10),
}


def _category_node(label: str, max_score: int) -> Obj:
    return Obj(
        fields={
            "score": Num(min_value=0, max_value=max_score),
            "maxScore": Num(default=max_score),
            "percentage": Num(min_value=0, max_value=100),
            "label": Str(default=label),
            "feedback": Str(),
        }
    )


def _finalize_leadership(result: dict[str, Any]) -> dict[str, Any]:
    # Category maxima are fixed by the rubric, whatever the model echoed back.
    for key, (label, max_score) in LEADERSHIP_CATEGORIES.items():
        category = result["categoryScores"][key]
        category["maxScore"] = max_score
        category["label"] = category["label"] or label
    return result


LEADERSHIP_RESULT = ResultSchema(
    tool=ToolKind.LEADERSHIP,
    root=Obj(
        required=True,
        fields={
            "overallScore": Num(required=True, min_value=0, max_value=100, integer=True),
            "scoreCategory": Choice(
                ("Beginner", "Developing", "Proficient", "Advanced", "Expert"), required=True
            ),
            "summary": Str(required=True),
            "categoryScores": Obj(
                required=True,
                fields={key: _category_node(label, max_score) for key, (label, max_score) in LEADERSHIP_CATEGORIES.items()},
            ),
            "strengths": Arr(Str(), non_empty=True),
            "developmentAreas": Arr(
                Obj(
                    fields={
                        "area": Str(required=True),
                        "importance": Choice(("critical", "high", "medium"), default="medium"),
                        "currentGap": Str(),
                        "recommendation": Str(),
                        "impact": Choice(("high", "medium", "low"), default="medium"),
                        "timeframe": Str(),
                    }
                )
            ),
            "actionPlan": Arr(
                Obj(
                    fields={
                        "priority": Choice(("immediate", "short-term", "medium-term"), default="short-term"),
                        "timeframe": Str(),
                        "actions": Arr(Str()),
                    }
                )
            ),
            "nextSteps": Arr(Str()),
            "benchmarkComparison": Obj(
                fields={
                    "percentile": Num(min_value=0, max_value=100, integer=True),
                    "message": Str(),
                    "context": Str(),
                }
            ),
            "targetRoleGap": Obj(
                fields={
                    "readinessPercentage": Num(min_value=0, max_value=100, integer=True),
                    "estimatedTimeToReady": Str(),
                    "criticalGaps": Arr(Str()),
                    "quickWins": Arr(Str()),
                }
            ),
        },
    ),
    finalize=_finalize_leadership,
)

RESULT_SCHEMAS: dict[ToolKind, ResultSchema] = {
    ToolKind.SALARY_ANALYSIS: SALARY_RESULT,
    ToolKind.LEADERSHIP: LEADERSHIP_RESULT,
}


def parse_for_tool(raw: str, tool: ToolKind) -> dict[str, Any]:
    if tool is ToolKind.COVER_LETTER:
        return parse_cover_letter(raw)
    return parse(raw, RESULT_SCHEMAS[tool])
