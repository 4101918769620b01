"""Validated ComparisonResult schema returned to callers and cached."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

InnovationLevel = Literal["Basic", "Intermediate", "Advanced", "Innovative"]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ScoreBreakdown(_Schema):
    summary: str
    signals: list[str]
    next_step: str


class DimensionScore(_Schema):
    """One analytical dimension scored 0-10 with its textual breakdown."""

    score: int = Field(ge=0, le=10)
    breakdown: ScoreBreakdown

    @field_validator("score", mode="before")
    @classmethod
    def round_fractional_score(cls, value: Any) -> Any:
        if isinstance(value, float):
            return round(value)
        return value


class ProjectAnalysis(_Schema):
    name: str
    purpose: str
    value_proposition: str
    tech_stack: list[str]
    key_features: list[str]
    strengths: list[str]
    improvement_areas: list[str]
    market_relevance: DimensionScore
    user_experience_complexity: DimensionScore
    technical_depth: DimensionScore
    innovation_gap: DimensionScore
    expert_recommendations: list[str]
    learning_opportunities: list[str]
    innovation_level: Optional[InnovationLevel] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("project name is required")
        return cleaned


class Winner(_Schema):
    name: str
    reasoning: str
    score: int = Field(ge=0, le=100)

    @field_validator("score", mode="before")
    @classmethod
    def round_fractional_score(cls, value: Any) -> Any:
        if isinstance(value, float):
            return round(value)
        return value


class HeadToHeadCategory(_Schema):
    project1_analysis: str
    project2_analysis: str
    winner: str


class HeadToHeadAnalysis(_Schema):
    market_relevance: HeadToHeadCategory
    user_experience: HeadToHeadCategory
    technical_depth: HeadToHeadCategory
    innovation: HeadToHeadCategory


class ComparisonResult(_Schema):
    """Complete comparison of two projects; the unit of caching."""

    project1: ProjectAnalysis
    project2: ProjectAnalysis
    winner: Winner
    head_to_head_analysis: HeadToHeadAnalysis
    comparative_learning_opportunities: list[str]
    overall_recommendation: str


def validate_comparison_result(payload: Any) -> ComparisonResult:
    """Validate a decoded payload; raises pydantic.ValidationError on any gap."""
    return ComparisonResult.model_validate(payload)
