"""Pydantic schema definitions for jobs, candidates and agent results."""

from __future__ import annotations

from .agents import (
    AIAnalysis,
    BackgroundCheckResult,
    InterviewQuestions,
    JobDescriptionDraft,
    OfferResult,
    SalaryEstimationResult,
    SourcingResult,
    fit_band,
)
from .candidate import Candidate, CandidatePatch, CandidateStatus, apply_patch
from .job import Job, JobStatus
from .notification import Notification, Toast

__all__ = [
    "AIAnalysis",
    "BackgroundCheckResult",
    "Candidate",
    "CandidatePatch",
    "CandidateStatus",
    "InterviewQuestions",
    "Job",
    "JobDescriptionDraft",
    "JobStatus",
    "Notification",
    "OfferResult",
    "SalaryEstimationResult",
    "SourcingResult",
    "Toast",
    "apply_patch",
    "fit_band",
]
