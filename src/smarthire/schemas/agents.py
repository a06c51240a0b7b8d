"""Structured results returned by the recruiting agents."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Recommendation = Literal["strong_fit", "medium_fit", "not_fit"]
RiskLevel = Literal["low", "medium", "high"]
FitBand = Literal["strong", "medium", "low"]


class JobDescriptionDraft(BaseModel):
    """Generated job description text."""

    description: str

    model_config = ConfigDict(extra="ignore")


class AIAnalysis(BaseModel):
    """Resume screening outcome for a candidate against a job."""

    skills_detected: list[str] = Field(default_factory=list)
    experience_years: float = Field(default=0.0, ge=0)
    fit_score: int = Field(default=0, ge=0, le=100)
    recommendation: Recommendation = "not_fit"
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    summary: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def fit_band(self) -> FitBand:
        return fit_band(self.fit_score)


class InterviewQuestions(BaseModel):
    """Interview guide grouped by question category."""

    technical: list[str] = Field(default_factory=list)
    behavioral: list[str] = Field(default_factory=list)
    culture: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)


class BackgroundCheckResult(BaseModel):
    """Risk signals found in the resume text."""

    risk_assessment: RiskLevel
    concerns: list[str] = Field(default_factory=list)
    verification_recommendations: list[str] = Field(default_factory=list)
    summary: str

    model_config = ConfigDict(extra="ignore", frozen=True)


class OfferResult(BaseModel):
    """Drafted offer letter and cover email."""

    offer_letter: str
    email_copy: str
    next_steps: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)


class SalaryEstimationResult(BaseModel):
    """Market salary estimate for a role."""

    estimated_range: str
    market_factors: list[str] = Field(default_factory=list)
    justification: str
    negotiation_advice: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SourcingResult(BaseModel):
    """Sourcing strategy for an open role."""

    platforms: list[str] = Field(default_factory=list)
    boolean_search_strings: dict[str, str] = Field(default_factory=dict)
    ideal_candidate_profile: str = ""
    outreach_templates: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("boolean_search_strings", mode="before")
    @classmethod
    def _drop_empty_search_strings(cls, value: object) -> object:
        if isinstance(value, dict):
            return {key: text for key, text in value.items() if text}
        return value


def fit_band(score: int) -> FitBand:
    """Bucket a fit score into Strong (>=80), Medium (>=50) or Low."""
    if score >= 80:
        return "strong"
    if score >= 50:
        return "medium"
    return "low"
