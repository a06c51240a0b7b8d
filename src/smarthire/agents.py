"""Prompt templates and typed wrappers for the recruiting agents."""

from __future__ import annotations

import math
from typing import Any, Sequence, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from .llm import MalformedResponseError, StructuredGenerator
from .schemas import (
    AIAnalysis,
    BackgroundCheckResult,
    InterviewQuestions,
    Job,
    JobDescriptionDraft,
    OfferResult,
    SalaryEstimationResult,
    SourcingResult,
)

ResultT = TypeVar("ResultT", bound=BaseModel)

INTERVIEW_TONES: tuple[str, ...] = (
    "Professional & Balanced",
    "Friendly & Casual",
    "Strict & Technical",
    "Behavioral Heavy",
)
DEFAULT_TONE = INTERVIEW_TONES[0]
DEFAULT_BENEFITS = "Standard benefits package"

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}


def _object(properties: dict[str, Any], required: Sequence[str]) -> dict[str, Any]:
    return {"type": "OBJECT", "properties": properties, "required": list(required)}


JOB_DESCRIPTION_SCHEMA = _object({"description": _STRING}, ["description"])

SCREENING_SCHEMA = _object(
    {
        "skills_detected": _STRING_LIST,
        "experience_years": {"type": "NUMBER"},
        "fit_score": {"type": "NUMBER"},
        "recommendation": {"type": "STRING", "enum": ["strong_fit", "medium_fit", "not_fit"]},
        "strengths": _STRING_LIST,
        "gaps": _STRING_LIST,
        "summary": _STRING,
    },
    ["skills_detected", "fit_score", "recommendation", "summary"],
)

INTERVIEW_SCHEMA = _object(
    {"technical": _STRING_LIST, "behavioral": _STRING_LIST, "culture": _STRING_LIST},
    ["technical", "behavioral", "culture"],
)

SOURCING_SCHEMA = _object(
    {
        "platforms": _STRING_LIST,
        "boolean_search_strings": {
            "type": "OBJECT",
            "properties": {"linkedin": _STRING, "google": _STRING, "github": _STRING},
        },
        "ideal_candidate_profile": _STRING,
        "outreach_templates": _STRING_LIST,
    },
    ["platforms", "boolean_search_strings", "ideal_candidate_profile", "outreach_templates"],
)

OFFER_SCHEMA = _object(
    {"offer_letter": _STRING, "email_copy": _STRING, "next_steps": _STRING_LIST},
    ["offer_letter", "email_copy", "next_steps"],
)

BACKGROUND_SCHEMA = _object(
    {
        "risk_assessment": {"type": "STRING", "enum": ["low", "medium", "high"]},
        "concerns": _STRING_LIST,
        "verification_recommendations": _STRING_LIST,
        "summary": _STRING,
    },
    ["risk_assessment", "concerns", "summary"],
)

SALARY_SCHEMA = _object(
    {
        "estimated_range": _STRING,
        "market_factors": _STRING_LIST,
        "justification": _STRING,
        "negotiation_advice": _STRING,
    },
    ["estimated_range", "justification"],
)


def job_description_prompt(
    title: str,
    skills: Sequence[str],
    responsibilities: Sequence[str],
    salary: str,
    seniority: str,
) -> str:
    return f"""You are a senior recruiter writing ATS-optimized job descriptions.
Job Title: {title}
Seniority: {seniority}
Salary Range: {salary}
Required Skills: {', '.join(skills)}
Key Responsibilities: {', '.join(responsibilities)}

Write a polished 300-word Job Description. Include an intro, a formatted responsibilities list,
a requirements list and a brief company pitch (use placeholders for the company name).
Return JSON with a single "description" field."""


def screening_prompt(resume_text: str, job: Job) -> str:
    return f"""You are a technical recruiter screening resumes.

JOB DETAILS:
Title: {job.title}
Skills Required: {', '.join(job.skills_required)}
Description Snippet: {job.description[:500]}...

CANDIDATE RESUME TEXT:
{resume_text}

Analyze the candidate and return JSON with:
- skills_detected (array of strings)
- experience_years (number, estimated from the resume)
- fit_score (0-100)
- recommendation (strong_fit, medium_fit, not_fit)
- strengths (array of strings)
- gaps (array of strings)
- summary (2-sentence profile)"""


def interview_prompt(job: Job, analysis: AIAnalysis, tone: str) -> str:
    return f"""You are an expert interviewer for tech roles.

JOB: {job.title}
DESCRIPTION: {job.description[:300]}...

CANDIDATE STRENGTHS: {', '.join(analysis.strengths)}
CANDIDATE GAPS: {', '.join(analysis.gaps)}
SUMMARY: {analysis.summary}

INTERVIEWER PERSONA/TONE: {tone}

Generate specific interview questions matching the requested tone. Return JSON:
- technical (5 specific questions testing skills and gaps)
- behavioral (3 questions based on experience)
- culture (2 questions for culture fit)"""


def sourcing_prompt(title: str, skills: Sequence[str], location: str) -> str:
    return f"""You are an expert talent sourcer. Build a sourcing strategy.
Role: {title}
Skills: {', '.join(skills)}
Location: {location}

Return JSON:
- platforms: the 5 best platforms to find this talent
- boolean_search_strings: object with keys 'linkedin', 'google', 'github' holding boolean search strings
- ideal_candidate_profile: 5-sentence persona description
- outreach_templates: array of 2 strings (one short, one long)"""


def offer_prompt(candidate_name: str, job_title: str, salary: str, start_date: str, benefits: str) -> str:
    return f"""You are an HR compensation specialist. Write a professional offer letter.
Candidate: {candidate_name}
Role: {job_title}
Salary: {salary}
Start Date: {start_date}
Benefits: {benefits}

Return JSON:
- offer_letter: full text of the formal offer letter
- email_copy: short email body to accompany the offer
- next_steps: array of 3 next steps"""


def background_prompt(candidate_name: str, resume_text: str, job_title: str) -> str:
    return f"""You are an HR compliance assistant.
Analyze this resume for potential risk signals (gaps, inconsistencies, vague claims).
Candidate: {candidate_name}
Role: {job_title}
Resume: {resume_text}

Do NOT perform real checks. Only analyze the provided text for red flags.
Return JSON:
- risk_assessment: "low", "medium" or "high"
- concerns: potential concerns found in the text
- verification_recommendations: 3 checks to run (e.g. Education, Employment)
- summary: 2-sentence neutral summary"""


def salary_prompt(job_title: str, location: str, seniority: str, skills: Sequence[str]) -> str:
    return f"""You are a compensation analyst. Estimate the salary range.
Role: {job_title}
Location: {location}
Seniority: {seniority}
Skills: {', '.join(skills)}

Return JSON:
- estimated_range: e.g. "$120k - $140k"
- market_factors: 3 reasons affecting this range
- justification: 2-sentence explanation
- negotiation_advice: short guidance for the recruiter"""


class RecruitingAgents:
    """One typed method per prompt template.

    Each call is single-shot: the generator is invoked once and its output is
    validated into the result model. Anything that does not validate surfaces
    as ``MalformedResponseError``.
    """

    def __init__(self, generator: StructuredGenerator):
        self._generator = generator
        self._logger = structlog.get_logger(__name__)

    def write_job_description(
        self,
        title: str,
        skills: Sequence[str],
        responsibilities: Sequence[str],
        salary: str,
        seniority: str,
    ) -> JobDescriptionDraft:
        prompt = job_description_prompt(title, skills, responsibilities, salary, seniority)
        return self._call("job_description", prompt, JOB_DESCRIPTION_SCHEMA, JobDescriptionDraft)

    def screen_resume(self, resume_text: str, job: Job) -> AIAnalysis:
        raw = self._generate("screening", screening_prompt(resume_text, job), SCREENING_SCHEMA)
        normalized = {
            "skills_detected": raw.get("skills_detected") or [],
            "experience_years": max(_as_number(raw.get("experience_years")), 0.0),
            "fit_score": min(max(round(_as_number(raw.get("fit_score"))), 0), 100),
            "recommendation": raw.get("recommendation") or "not_fit",
            "strengths": raw.get("strengths") or [],
            "gaps": raw.get("gaps") or [],
            "summary": raw.get("summary") or "",
        }
        return self._validate("screening", normalized, AIAnalysis)

    def generate_interview_questions(
        self,
        job: Job,
        analysis: AIAnalysis,
        tone: str = DEFAULT_TONE,
    ) -> InterviewQuestions:
        prompt = interview_prompt(job, analysis, tone)
        return self._call("interview_questions", prompt, INTERVIEW_SCHEMA, InterviewQuestions)

    def generate_sourcing_strategy(self, title: str, skills: Sequence[str], location: str) -> SourcingResult:
        prompt = sourcing_prompt(title, skills, location)
        return self._call("sourcing", prompt, SOURCING_SCHEMA, SourcingResult)

    def write_offer(
        self,
        candidate_name: str,
        job_title: str,
        salary: str,
        start_date: str,
        benefits: str = DEFAULT_BENEFITS,
    ) -> OfferResult:
        prompt = offer_prompt(candidate_name, job_title, salary, start_date, benefits)
        return self._call("offer", prompt, OFFER_SCHEMA, OfferResult)

    def check_background_risk(self, candidate_name: str, resume_text: str, job_title: str) -> BackgroundCheckResult:
        prompt = background_prompt(candidate_name, resume_text, job_title)
        return self._call("background_check", prompt, BACKGROUND_SCHEMA, BackgroundCheckResult)

    def estimate_salary(
        self,
        job_title: str,
        location: str,
        seniority: str,
        skills: Sequence[str],
    ) -> SalaryEstimationResult:
        prompt = salary_prompt(job_title, location, seniority, skills)
        return self._call("salary_estimation", prompt, SALARY_SCHEMA, SalaryEstimationResult)

    def _call(self, agent: str, prompt: str, schema: dict[str, Any], model: type[ResultT]) -> ResultT:
        return self._validate(agent, self._generate(agent, prompt, schema), model)

    def _generate(self, agent: str, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
        self._logger.debug("agent.call", agent=agent, prompt_chars=len(prompt))
        return self._generator.generate(prompt, schema)

    def _validate(self, agent: str, raw: dict[str, Any], model: type[ResultT]) -> ResultT:
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            self._logger.warning("agent.invalid_response", agent=agent, errors=exc.error_count())
            raise MalformedResponseError(f"{agent} response did not match schema") from exc


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


__all__ = [
    "DEFAULT_BENEFITS",
    "DEFAULT_TONE",
    "INTERVIEW_TONES",
    "RecruitingAgents",
]
