from __future__ import annotations

from enum import Enum


class ToolKind(str, Enum):
    COVER_LETTER = "cover_letter"
    SALARY_ANALYSIS = "salary_analysis"
    LEADERSHIP = "leadership"


class PipelineState(str, Enum):
    RECEIVED = "RECEIVED"
    QUOTA_CHECKED = "QUOTA_CHECKED"
    VALIDATED = "VALIDATED"
    PROMPTED = "PROMPTED"
    GENERATED = "GENERATED"
    PARSED = "PARSED"
    RESPONDED = "RESPONDED"
    FAILED = "FAILED"
