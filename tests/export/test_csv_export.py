from __future__ import annotations

import csv
import io

import pytest

from smarthire.export import (
    candidate_csv,
    export_filename,
    interview_guide_html,
    interview_guide_text,
    job_candidates_csv,
)
from smarthire.schemas import AIAnalysis, Candidate, InterviewQuestions, Job

JOB = Job(id="j1", title="Senior Frontend Engineer", created_at="2024-05-01T09:00:00Z")


def build_candidate(**kwargs) -> Candidate:
    defaults = {
        "id": "c1",
        "job_id": "j1",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0101",
        "created_at": "2024-05-01T09:00:00Z",
    }
    defaults.update(kwargs)
    return Candidate(**defaults)


def test_candidate_csv_escapes_quotes():
    candidate = build_candidate(
        name='Jane "JJ" Doe',
        status="screened",
        ai_analysis=AIAnalysis(
            skills_detected=["React", "TypeScript"],
            fit_score=92,
            recommendation="strong_fit",
            summary='Says "expert", backs it up.',
        ),
    )

    content = candidate_csv(candidate, JOB)

    lines = content.splitlines()
    assert lines[0] == '"Name","Email","Phone","Job","Status","Fit Score","Recommendation","Summary","Skills"'
    assert lines[1].startswith('"Jane ""JJ"" Doe","jane@example.com"')
    row = next(csv.reader(io.StringIO(lines[1])))
    assert row[7] == 'Says "expert", backs it up.'
    assert row[8] == "React, TypeScript"


def test_candidate_csv_requires_analysis():
    with pytest.raises(ValueError):
        candidate_csv(build_candidate(), JOB)


def test_job_candidates_csv_formats_dates():
    rows = list(
        csv.reader(
            io.StringIO(
                job_candidates_csv(
                    [
                        build_candidate(ai_analysis=AIAnalysis(fit_score=70)),
                        build_candidate(id="c2", name="John Smith", created_at="sometime"),
                    ]
                )
            )
        )
    )

    assert rows[0] == ["Name", "Status", "Fit Score", "Email", "Phone", "Added Date"]
    assert rows[1] == ["Jane Doe", "new", "70", "jane@example.com", "555-0101", "2024-05-01"]
    assert rows[2][2] == "0"
    assert rows[2][5] == "sometime"


def test_interview_guide_text_sections():
    questions = InterviewQuestions(technical=["T1", "T2"], behavioral=["B1"], culture=[])

    assert interview_guide_text(questions) == "TECHNICAL:\n- T1\n- T2\n\nBEHAVIORAL:\n- B1\n\nCULTURE:"


def test_interview_guide_html_escapes_values():
    candidate = build_candidate(
        name="<script>alert(1)</script>",
        interview_questions=InterviewQuestions(technical=["Use <b>tags</b>?"]),
    )

    page = interview_guide_html(candidate, JOB, "Friendly & Casual", today="2024-05-02")

    assert "<script>" not in page
    assert "&lt;script&gt;" in page
    assert "<li>Use &lt;b&gt;tags&lt;/b&gt;?</li>" in page
    assert "Friendly &amp; Casual" in page
    assert "2024-05-02" in page


def test_interview_guide_html_requires_questions():
    with pytest.raises(ValueError):
        interview_guide_html(build_candidate(), JOB, "Professional & Balanced")


def test_export_filename():
    assert export_filename("candidate", "Jane  Doe") == "candidate_Jane_Doe.csv"
    assert export_filename("guide", "Ana", ".html") == "guide_Ana.html"
