"""Built-in sample jobs and candidates."""

from __future__ import annotations

import pendulum

from ..schemas import AIAnalysis, Candidate, Job


def demo_jobs(created_at: str | None = None) -> list[Job]:
    stamp = created_at or pendulum.now("UTC").to_iso8601_string()
    return [
        Job(
            id="j1",
            title="Senior Frontend Engineer",
            location="Remote",
            salary_range="$140k - $180k",
            seniority="Senior",
            skills_required=["React", "TypeScript", "Tailwind", "Node.js"],
            responsibilities=["Build scalable UI", "Mentor juniors", "Architect frontend"],
            description=(
                "We are looking for a Senior Frontend Engineer to lead our web team. "
                "You will be responsible for architecture, code quality, and performance."
            ),
            status="active",
            created_at=stamp,
        ),
        Job(
            id="j2",
            title="Product Manager",
            location="New York, NY",
            salary_range="$130k - $160k",
            seniority="Mid-Level",
            skills_required=["Roadmapping", "Agile", "User Research", "SQL"],
            responsibilities=["Define product strategy", "Work with engineering", "Analyze user data"],
            description=(
                "Join our product team to drive the vision of our core platform. "
                "You will work closely with engineering and design."
            ),
            status="active",
            created_at=stamp,
        ),
    ]


def demo_candidates(created_at: str | None = None) -> list[Candidate]:
    stamp = created_at or pendulum.now("UTC").to_iso8601_string()
    return [
        Candidate(
            id="c1",
            job_id="j1",
            name="Jane Doe",
            email="jane@example.com",
            phone="555-0101",
            resume_text=(
                "Senior React Developer with 6 years experience. Expert in TypeScript and "
                "Performance optimization. Previously at Tech Corp."
            ),
            status="screened",
            notes=(
                "Initial impression: Very strong technical background. "
                "Need to verify culture fit in the next round."
            ),
            ai_analysis=AIAnalysis(
                skills_detected=["React", "TypeScript", "Performance"],
                experience_years=6,
                fit_score=92,
                recommendation="strong_fit",
                strengths=["Deep React knowledge", "Senior experience"],
                gaps=["Node.js backend experience limited"],
                summary="Jane is a strong frontend specialist with significant React ecosystem experience.",
            ),
            created_at=stamp,
        ),
        Candidate(
            id="c2",
            job_id="j1",
            name="John Smith",
            email="john@example.com",
            phone="555-0102",
            resume_text=(
                "Fullstack developer mostly focused on Python/Django. "
                "Started learning React last year. Good generalist."
            ),
            status="new",
            notes="",
            created_at=stamp,
        ),
    ]
