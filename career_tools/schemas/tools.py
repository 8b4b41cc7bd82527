from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ErrorCode = Literal["VALIDATION_ERROR", "RATE_LIMIT_EXCEEDED", "UPSTREAM_ERROR", "PARSE_ERROR"]
Priority = Literal["high", "medium", "low"]


class ErrorBody(BaseModel):
    error: ErrorCode
    message: str
    retryAfter: int | None = Field(default=None, ge=1)
    field: str | None = None


class CoverLetterResult(BaseModel):
    coverLetter: str
    wordCount: int = Field(ge=0)


# Salary analysis


class SalaryRange(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    median: float = Field(ge=0)
    currency: str
    currencySymbol: str


class Percentiles(BaseModel):
    p10: float = Field(ge=0)
    p25: float = Field(ge=0)
    p50: float = Field(ge=0)
    p75: float = Field(ge=0)
    p90: float = Field(ge=0)


class SalaryBreakdown(BaseModel):
    baseSalary: float = Field(ge=0)
    bonus: float = Field(ge=0)
    stockOptions: float = Field(ge=0)
    benefits: float = Field(ge=0)
    total: float = Field(ge=0)


class YearGrowth(BaseModel):
    year: int
    growth: float


class CountryComparison(BaseModel):
    country: str
    salary: float = Field(ge=0)
    costOfLivingAdjusted: float = Field(ge=0)
    purchasingPower: float
    flag: str


class ExperiencePoint(BaseModel):
    years: int = Field(ge=0)
    expectedSalary: float = Field(ge=0)


class IndustryComparison(BaseModel):
    industry: str
    avgSalary: float = Field(ge=0)
    difference: float
    percentageDiff: float


class CostOfLiving(BaseModel):
    adjustedSalary: float = Field(ge=0)
    purchasingPowerRank: int = Field(ge=1, le=10)
    insights: str


class NegotiationInsight(BaseModel):
    category: str
    insights: list[str]
    priority: Priority


class SalaryAnalysis(BaseModel):
    salaryRange: SalaryRange
    percentiles: Percentiles
    confidenceScore: int = Field(ge=0, le=100)
    dataSampleSize: int = Field(ge=0)
    salaryBreakdown: SalaryBreakdown
    yearOverYearGrowth: list[YearGrowth]
    countryComparisons: list[CountryComparison]
    experienceImpact: list[ExperiencePoint]
    industryComparisons: list[IndustryComparison]
    costOfLivingAdjusted: CostOfLiving
    negotiationInsights: list[NegotiationInsight]
    marketInsights: list[str]
    summary: str


# Leadership readiness


class CategoryScore(BaseModel):
    score: float = Field(ge=0)
    maxScore: int = Field(ge=1)
    percentage: float = Field(ge=0, le=100)
    label: str
    feedback: str


class CategoryScores(BaseModel):
    experience: CategoryScore
    currentRole: CategoryScore
    teamSize: CategoryScore
    leadershipSkills: CategoryScore
    softSkills: CategoryScore
    achievements: CategoryScore
    industry: CategoryScore


class DevelopmentArea(BaseModel):
    area: str
    importance: Literal["critical", "high", "medium"]
    currentGap: str
    recommendation: str
    impact: Priority
    timeframe: str


class ActionPlanItem(BaseModel):
    priority: Literal["immediate", "short-term", "medium-term"]
    timeframe: str
    actions: list[str]


class Certification(BaseModel):
    name: str
    provider: str
    relevance: Literal["high", "medium"]
    timeframe: str
    costRange: str
    rationale: str


class Resource(BaseModel):
    type: Literal["book", "course", "podcast", "blog"]
    title: str
    author: str
    relevance: str
    priority: Literal["high", "medium"]


class BenchmarkComparison(BaseModel):
    percentile: int = Field(ge=0, le=100)
    message: str
    context: str


class TargetRoleGap(BaseModel):
    readinessPercentage: int = Field(ge=0, le=100)
    estimatedTimeToReady: str
    criticalGaps: list[str]
    quickWins: list[str]


class LeadershipAssessment(BaseModel):
    overallScore: int = Field(ge=0, le=100)
    scoreCategory: Literal["Beginner", "Developing", "Proficient", "Advanced", "Expert"]
    summary: str
    categoryScores: CategoryScores
    strengths: list[str] = Field(min_length=1)
    developmentAreas: list[DevelopmentArea]
    actionPlan: list[ActionPlanItem]
    nextSteps: list[str]
    benchmarkComparison: BenchmarkComparison
    targetRoleGap: TargetRoleGap
    recommendedCertifications: list[Certification]
    recommendedResources: list[Resource]
