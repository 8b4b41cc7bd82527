from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from career_tools.generation.catalog import COMPANY_SIZES, COUNTRIES, EDUCATION_LEVELS, WORK_MODES
from career_tools.generation.errors import InputValidationError
from career_tools.generation.types import ToolKind

FieldKind = Literal["text", "integer", "choice", "text_list", "rating_map"]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    label: str
    required: bool = True
    min_chars: int | None = None
    max_chars: int | None = None
    max_words: int | None = None
    min_value: int | None = None
    max_value: int | None = None
    choices: tuple[str, ...] | None = None
    max_items: int | None = None
    default: Any = None


@dataclass(frozen=True)
class InputSchema:
    tool: ToolKind
    fields: tuple[FieldSpec, ...]


def word_count(text: str) -> int:
    return len(text.split())


def _fail(spec: FieldSpec, constraint: str, message: str) -> InputValidationError:
    return InputValidationError(field=spec.name, constraint=constraint, message=message)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, dict)) and not value:
        return True
    return False


def _empty_default(spec: FieldSpec) -> Any:
    if spec.default is not None:
        return spec.default
    if spec.kind == "text_list":
        return []
    if spec.kind == "rating_map":
        return {}
    return None


def _check_text(spec: FieldSpec, value: Any) -> str:
    label = spec.label
    if not isinstance(value, str):
        raise _fail(spec, "type", f"{label} must be a string.")
    text = value.strip()
    if spec.min_chars is not None and len(text) < spec.min_chars:
        raise _fail(spec, "min_chars", f"{label} must be at least {spec.min_chars:,} characters long.")
    if spec.max_chars is not None and len(text) > spec.max_chars:
        raise _fail(
            spec,
            "max_chars",
            f"{label} must be at most {spec.max_chars:,} characters (received {len(text):,}).",
        )
    if spec.max_words is not None:
        words = word_count(text)
        if words > spec.max_words:
            raise _fail(
                spec,
                "max_words",
                f"{label} exceeds the {spec.max_words:,} word limit (current: {words:,} words).",
            )
    return text


def _match_choice(spec: FieldSpec, value: str) -> str:
    lookup = {choice.lower(): choice for choice in spec.choices or ()}
    matched = lookup.get(value.strip().lower())
    if matched is None:
        raise _fail(spec, "choice", f"{spec.label} must be one of: {', '.join(spec.choices or ())}.")
    return matched


def _check_integer(spec: FieldSpec, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _fail(spec, "type", f"{spec.label} must be a whole number.")
    if isinstance(value, float):
        if not value.is_integer():
            raise _fail(spec, "type", f"{spec.label} must be a whole number.")
        value = int(value)
    if spec.min_value is not None and value < spec.min_value:
        raise _fail(spec, "min_value", f"{spec.label} must be at least {spec.min_value}.")
    if spec.max_value is not None and value > spec.max_value:
        raise _fail(spec, "max_value", f"{spec.label} must be at most {spec.max_value}.")
    return value


def _check_text_list(spec: FieldSpec, value: Any) -> list[str]:
    if not isinstance(value, list):
        raise _fail(spec, "type", f"{spec.label} must be a list of strings.")
    if spec.max_items is not None and len(value) > spec.max_items:
        raise _fail(spec, "max_items", f"{spec.label} accepts at most {spec.max_items} items.")
    items: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise _fail(spec, "type", f"{spec.label} item {index + 1} must be a string.")
        if not item.strip():
            continue
        if spec.max_chars is not None and len(item.strip()) > spec.max_chars:
            raise _fail(
                spec,
                "max_chars",
                f"{spec.label} item {index + 1} must be at most {spec.max_chars} characters.",
            )
        items.append(item.strip())
    if spec.required and not items:
        raise _fail(spec, "required", f"{spec.label} must include at least one item.")
    return items


def _check_rating_map(spec: FieldSpec, value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        raise _fail(spec, "type", f"{spec.label} must be an object of ratings.")
    if spec.max_items is not None and len(value) > spec.max_items:
        raise _fail(spec, "max_items", f"{spec.label} accepts at most {spec.max_items} entries.")
    ratings: dict[str, int] = {}
    for key, rating in value.items():
        name = str(key).strip()
        if not name:
            continue
        if spec.max_chars is not None and len(name) > spec.max_chars:
            raise _fail(spec, "max_chars", f"{spec.label} names must be at most {spec.max_chars} characters.")
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise _fail(spec, "type", f"{spec.label} rating for '{name}' must be a whole number.")
        if (spec.min_value is not None and rating < spec.min_value) or (
            spec.max_value is not None and rating > spec.max_value
        ):
            raise _fail(
                spec,
                "range",
                f"{spec.label} rating for '{name}' must be between {spec.min_value} and {spec.max_value}.",
            )
        ratings[name] = rating
    return ratings


def _check_field(spec: FieldSpec, value: Any) -> Any:
    if _is_missing(value):
        if spec.required:
            raise _fail(spec, "required", f"{spec.label} is required.")
        return _empty_default(spec)

    if spec.kind == "text":
        return _check_text(spec, value)
    if spec.kind == "choice":
        if not isinstance(value, str):
            raise _fail(spec, "type", f"{spec.label} must be a string.")
        return _match_choice(spec, value)
    if spec.kind == "integer":
        return _check_integer(spec, value)
    if spec.kind == "text_list":
        return _check_text_list(spec, value)
    if spec.kind == "rating_map":
        return _check_rating_map(spec, value)
    raise ValueError(f"Unknown field kind '{spec.kind}'")


def validate(raw_payload: Any, schema: InputSchema) -> dict[str, Any]:
    """Check a decoded request body against a tool schema.

    Fields are checked in declaration order and the first violation raises
    `InputValidationError` carrying the field name and the constraint that
    failed. Unknown keys are ignored. Returns the cleaned values keyed by
    field name, with optional fields filled with their defaults.
    """
    if not isinstance(raw_payload, Mapping):
        raise InputValidationError(field="body", constraint="type", message="Request body must be a JSON object.")
    return {spec.name: _check_field(spec, raw_payload.get(spec.name)) for spec in schema.fields}


COVER_LETTER_INPUT = InputSchema(
    tool=ToolKind.COVER_LETTER,
    fields=(
        FieldSpec("resume", "text", "Resume", min_chars=50, max_chars=15000, max_words=2500),
        FieldSpec("jobDescription", "text", "Job description", min_chars=10, max_chars=4000),
    ),
)

SALARY_INPUT = InputSchema(
    tool=ToolKind.SALARY_ANALYSIS,
    fields=(
        FieldSpec("country", "choice", "Country", choices=COUNTRIES),
        FieldSpec("jobTitle", "text", "Job title", min_chars=2, max_chars=120),
        FieldSpec("yearsExperience", "integer", "Years of experience", min_value=0, max_value=40),
        FieldSpec("industry", "text", "Industry", min_chars=2, max_chars=100),
        FieldSpec("city", "text", "City", required=False, max_chars=100),
        FieldSpec("companySize", "choice", "Company size", required=False, choices=COMPANY_SIZES),
        FieldSpec("education", "choice", "Education", required=False, choices=EDUCATION_LEVELS),
        FieldSpec("skills", "text_list", "Skills", required=False, max_items=15, max_chars=60),
        FieldSpec("workMode", "choice", "Work mode", required=False, choices=WORK_MODES),
    ),
)

LEADERSHIP_INPUT = InputSchema(
    tool=ToolKind.LEADERSHIP,
    fields=(
        FieldSpec("currentRole", "text", "Current role", min_chars=2, max_chars=100),
        FieldSpec("targetRole", "text", "Target role", min_chars=2, max_chars=100),
        FieldSpec("industry", "text", "Industry", min_chars=2, max_chars=100),
        FieldSpec("yearsExperience", "integer", "Years of experience", required=False,
                  min_value=0, max_value=40, default=0),
        FieldSpec("teamSize", "integer", "Team size", required=False, min_value=0, max_value=100, default=0),
        FieldSpec("leadershipSkills", "text_list", "Leadership skills", required=False, max_items=20, max_chars=80),
        FieldSpec("softSkills", "rating_map", "Soft skills", required=False,
                  min_value=1, max_value=5, max_items=15, max_chars=80),
        FieldSpec("achievements", "text_list", "Achievements", required=False, max_items=20, max_chars=200),
    ),
)

INPUT_SCHEMAS: dict[ToolKind, InputSchema] = {
    ToolKind.COVER_LETTER: COVER_LETTER_INPUT,
    ToolKind.SALARY_ANALYSIS: SALARY_INPUT,
    ToolKind.LEADERSHIP: LEADERSHIP_INPUT,
}
