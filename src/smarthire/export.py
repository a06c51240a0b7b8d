"""CSV and interview-guide exports."""

from __future__ import annotations

import csv
import html
import io
import re
from typing import Iterable, Sequence

import pendulum

from .schemas import Candidate, InterviewQuestions, Job

CANDIDATE_HEADERS = (
    "Name",
    "Email",
    "Phone",
    "Job",
    "Status",
    "Fit Score",
    "Recommendation",
    "Summary",
    "Skills",
)
JOB_LIST_HEADERS = ("Name", "Status", "Fit Score", "Email", "Phone", "Added Date")

_WHITESPACE_RE = re.compile(r"\s+")


def _render_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def candidate_csv(candidate: Candidate, job: Job) -> str:
    """Single-candidate export; the candidate must have been screened."""
    analysis = candidate.ai_analysis
    if analysis is None:
        raise ValueError(f"Candidate {candidate.id!r} has no screening analysis to export")
    row = (
        candidate.name,
        candidate.email,
        candidate.phone,
        job.title,
        candidate.status,
        analysis.fit_score,
        analysis.recommendation,
        analysis.summary,
        ", ".join(analysis.skills_detected),
    )
    return _render_csv(CANDIDATE_HEADERS, [row])


def job_candidates_csv(candidates: Iterable[Candidate]) -> str:
    rows = (
        (
            item.name,
            item.status,
            item.ai_analysis.fit_score if item.ai_analysis else 0,
            item.email,
            item.phone,
            _format_date(item.created_at),
        )
        for item in candidates
    )
    return _render_csv(JOB_LIST_HEADERS, rows)


def interview_guide_text(questions: InterviewQuestions) -> str:
    sections = (
        ("TECHNICAL", questions.technical),
        ("BEHAVIORAL", questions.behavioral),
        ("CULTURE", questions.culture),
    )
    blocks = []
    for title, items in sections:
        lines = [f"{title}:"] + [f"- {item}" for item in items]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def interview_guide_html(candidate: Candidate, job: Job, tone: str, *, today: str | None = None) -> str:
    """Printable interview guide; all interpolated values are escaped."""
    questions = candidate.interview_questions
    if questions is None:
        raise ValueError(f"Candidate {candidate.id!r} has no interview questions")
    date = today or pendulum.today().to_date_string()
    esc = html.escape

    def _items(values: Sequence[str]) -> str:
        return "".join(f"<li>{esc(value)}</li>" for value in values)

    return f"""<html>
<head>
  <title>Interview Guide - {esc(candidate.name)}</title>
  <style>
    body {{ font-family: sans-serif; padding: 40px; line-height: 1.6; color: #333; }}
    h1 {{ border-bottom: 2px solid #eee; padding-bottom: 10px; }}
    h2 {{ margin-top: 30px; font-size: 18px; border-bottom: 1px solid #eee; }}
    .meta {{ color: #666; font-size: 14px; background: #f9f9f9; padding: 15px; }}
  </style>
</head>
<body>
  <h1>Interview Guide: {esc(candidate.name)}</h1>
  <div class="meta">
    <strong>Job:</strong> {esc(job.title)}<br>
    <strong>Date:</strong> {esc(date)}<br>
    <strong>Tone:</strong> {esc(tone)}
  </div>
  <h2>Technical Questions</h2>
  <ul>{_items(questions.technical)}</ul>
  <h2>Behavioral Questions</h2>
  <ul>{_items(questions.behavioral)}</ul>
  <h2>Culture Fit Questions</h2>
  <ul>{_items(questions.culture)}</ul>
</body>
</html>
"""


def export_filename(prefix: str, name: str, suffix: str = ".csv") -> str:
    """``candidate`` + ``Jane Doe`` -> ``candidate_Jane_Doe.csv``."""
    return f"{prefix}_{_WHITESPACE_RE.sub('_', name.strip())}{suffix}"


def _format_date(value: str) -> str:
    try:
        return pendulum.parse(value).to_date_string()
    except ValueError:
        return value


__all__ = [
    "candidate_csv",
    "export_filename",
    "interview_guide_html",
    "interview_guide_text",
    "job_candidates_csv",
]
