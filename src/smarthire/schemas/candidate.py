from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from .agents import (
    AIAnalysis,
    BackgroundCheckResult,
    InterviewQuestions,
    OfferResult,
    SalaryEstimationResult,
)

CandidateStatus = Literal["new", "screened", "interviewing", "offer", "rejected"]

_REQUIRED_ON_CANDIDATE = ("name", "email", "phone", "resume_text", "status")


class Candidate(BaseModel):
    """Person under consideration for a specific job."""

    id: str
    job_id: str
    name: str
    email: str = ""
    phone: str = ""
    resume_text: str = ""
    status: CandidateStatus = "new"
    notes: str | None = None
    ai_analysis: AIAnalysis | None = None
    interview_questions: InterviewQuestions | None = None
    background_check: BackgroundCheckResult | None = None
    offer_data: OfferResult | None = None
    salary_estimation: SalaryEstimationResult | None = None
    created_at: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class CandidatePatch(BaseModel):
    """Fields of a candidate that may be updated independently.

    Only fields explicitly passed to the constructor take part in a merge, so
    ``CandidatePatch(notes=None)`` clears the notes while ``CandidatePatch()``
    leaves them alone.
    """

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    resume_text: str | None = None
    status: CandidateStatus | None = None
    notes: str | None = None
    ai_analysis: AIAnalysis | None = None
    interview_questions: InterviewQuestions | None = None
    background_check: BackgroundCheckResult | None = None
    offer_data: OfferResult | None = None
    salary_estimation: SalaryEstimationResult | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _required_fields_not_cleared(self) -> "CandidatePatch":
        for name in _REQUIRED_ON_CANDIDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> dict[str, object]:
        """Return the explicitly set fields, keeping nested models intact."""
        return {name: getattr(self, name) for name in self.model_fields_set}


def apply_patch(candidate: Candidate, patch: CandidatePatch) -> Candidate:
    """Merge ``patch`` into ``candidate``; patch values win."""
    changes = patch.changes()
    if not changes:
        return candidate
    return candidate.model_copy(update=changes)
