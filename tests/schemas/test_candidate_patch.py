from __future__ import annotations

import pytest
from pydantic import ValidationError

from smarthire.schemas import AIAnalysis, Candidate, CandidatePatch, apply_patch, fit_band


def build_candidate() -> Candidate:
    return Candidate(
        id="c1",
        job_id="j1",
        name="Jane Doe",
        email="jane@example.com",
        notes="call back",
        created_at="2024-05-01T09:00:00Z",
    )


def test_only_explicit_fields_are_changes():
    patch = CandidatePatch(status="screened", notes=None)

    assert patch.changes() == {"status": "screened", "notes": None}


def test_patch_clears_optional_fields():
    updated = apply_patch(build_candidate(), CandidatePatch(notes=None))

    assert updated.notes is None
    assert updated.email == "jane@example.com"


def test_patch_cannot_clear_required_fields():
    with pytest.raises(ValidationError):
        CandidatePatch(name=None)
    with pytest.raises(ValidationError):
        CandidatePatch(status=None)


def test_empty_patch_returns_same_candidate():
    candidate = build_candidate()

    assert apply_patch(candidate, CandidatePatch()) is candidate


def test_unknown_fields_are_forbidden():
    with pytest.raises(ValidationError):
        CandidatePatch(job_id="j2")
    with pytest.raises(ValidationError):
        Candidate(id="c1", job_id="j1", name="Jane", created_at="now", rating=5)


def test_analysis_bounds_and_band():
    with pytest.raises(ValidationError):
        AIAnalysis(fit_score=101)
    with pytest.raises(ValidationError):
        AIAnalysis(experience_years=-1)

    assert AIAnalysis(fit_score=80).fit_band == "strong"
    assert fit_band(79) == "medium"
    assert fit_band(50) == "medium"
    assert fit_band(49) == "low"
