"""Recruiter-facing actions composed over the store, agents and notifications."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Sequence, TypeVar

import pendulum
import structlog

from .agents import DEFAULT_BENEFITS, DEFAULT_TONE, RecruitingAgents
from .core import lifecycle
from .core.ids import random_id
from .core.notifications import NotificationCenter
from .core.search import DEFAULT_USAGE_LIMIT, DashboardSummary, SearchResults, StoreSearch, dashboard_summary
from .core.store import DuplicateIdError, EntityStore
from .llm import StructuredGenerationError
from .schemas import (
    BackgroundCheckResult,
    Candidate,
    CandidatePatch,
    InterviewQuestions,
    Job,
    JobDescriptionDraft,
    OfferResult,
    SalaryEstimationResult,
    SourcingResult,
)

T = TypeVar("T")
R = TypeVar("R", Job, Candidate)


class RecruitingWorkspace:
    """Root composition unit for one recruiting session.

    Owns a single entity store and notification center. Agent-backed actions
    mark themselves in flight for their duration, catch every
    ``StructuredGenerationError`` where the call is issued and turn it into an
    error toast; they return ``None`` instead of raising. Results for a
    candidate removed while the call was pending are dropped.
    """

    def __init__(
        self,
        *,
        store: EntityStore,
        notifications: NotificationCenter,
        agents: RecruitingAgents,
        search: StoreSearch | None = None,
        usage_limit: int = DEFAULT_USAGE_LIMIT,
        id_factory: Callable[[], str] = random_id,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._agents = agents
        self._search = search or StoreSearch()
        self._usage_limit = usage_limit
        self._new_id = id_factory
        self._in_flight: set[tuple[str, str | None]] = set()
        self._logger = structlog.get_logger(__name__)

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    def is_busy(self, action: str, subject_id: str | None = None) -> bool:
        return (action, subject_id) in self._in_flight

    # -- jobs ------------------------------------------------------------

    def draft_job_description(
        self,
        title: str,
        skills: Sequence[str],
        responsibilities: Sequence[str] = (),
        salary_range: str = "",
        seniority: str = "Mid-Level",
    ) -> JobDescriptionDraft | None:
        skills = _clean_list(skills)
        if not title.strip() or not skills:
            self._notifications.add_toast(
                "Please provide a Job Title and Skills to generate a description.", "error"
            )
            return None
        return self._run_agent(
            "draft_job_description",
            None,
            "Failed to generate description. Please check your API key.",
            lambda: self._agents.write_job_description(
                title.strip(), skills, _clean_list(responsibilities), salary_range, seniority
            ),
        )

    def create_job(
        self,
        title: str,
        *,
        location: str = "",
        salary_range: str = "",
        seniority: str = "Mid-Level",
        skills: Sequence[str] = (),
        responsibilities: Sequence[str] = (),
        description: str = "",
        status: str = "active",
    ) -> Job | None:
        if not title.strip():
            self._notifications.add_toast("A job title is required.", "error")
            return None
        job = self._insert_with_fresh_id(
            "job",
            lambda record_id: Job(
                id=record_id,
                title=title.strip(),
                location=location,
                salary_range=salary_range,
                seniority=seniority,
                skills_required=_clean_list(skills),
                responsibilities=_clean_list(responsibilities),
                description=description,
                status=status,
                created_at=_now(),
            ),
            self._store.add_job,
        )
        if job is None:
            return None
        self._notifications.add_toast(f'Job "{job.title}" created', "success")
        return job

    def delete_job(self, job_id: str) -> bool:
        job = self._store.get_job(job_id)
        if job is None:
            self._notifications.add_toast("Job not found", "error")
            return False
        self._store.delete_job(job_id)
        self._notifications.add_toast(f'Job "{job.title}" deleted', "success")
        return True

    def generate_sourcing_strategy(
        self,
        title: str,
        skills: Sequence[str],
        location: str = "",
    ) -> SourcingResult | None:
        result = self._run_agent(
            "sourcing",
            None,
            "Failed to generate sourcing strategy",
            lambda: self._agents.generate_sourcing_strategy(title, _clean_list(skills), location),
        )
        if result is not None:
            self._notifications.add_toast("Sourcing strategy ready!", "success")
        return result

    # -- candidates ------------------------------------------------------

    def screen_candidate(
        self,
        job_id: str,
        name: str,
        resume_text: str,
        *,
        email: str = "",
        phone: str = "",
    ) -> Candidate | None:
        """Screen a resume and store the candidate as ``screened``."""
        if not name.strip() or not resume_text.strip() or not job_id:
            self._notifications.add_toast("Please fill in all fields.", "error")
            return None
        job = self._store.get_job(job_id)
        if job is None:
            self._notifications.add_toast("Job not found", "error")
            return None

        analysis = self._run_agent(
            "screen_candidate",
            job_id,
            "Screening failed. Please check API key and try again.",
            lambda: self._agents.screen_resume(resume_text, job),
        )
        if analysis is None:
            return None
        if self._store.get_job(job_id) is None:
            self._logger.info("workspace.result_discarded", action="screen_candidate", job_id=job_id)
            return None

        candidate = self._insert_with_fresh_id(
            "candidate",
            lambda record_id: Candidate(
                id=record_id,
                job_id=job_id,
                name=name.strip(),
                email=email,
                phone=phone,
                resume_text=resume_text,
                status=lifecycle.initial_status("screened"),
                ai_analysis=analysis,
                created_at=_now(),
            ),
            self._store.add_candidate,
        )
        if candidate is None:
            return None
        self._logger.info(
            "workspace.candidate_screened",
            candidate_id=candidate.id,
            fit_score=analysis.fit_score,
            recommendation=analysis.recommendation,
        )
        return candidate

    def add_candidate(
        self,
        job_id: str,
        name: str,
        *,
        email: str = "",
        phone: str = "",
        resume_text: str = "",
        status: str | None = None,
        notes: str | None = None,
    ) -> Candidate | None:
        if not name.strip():
            self._notifications.add_toast("A candidate name is required.", "error")
            return None
        if self._store.get_job(job_id) is None:
            self._notifications.add_toast("Job not found", "error")
            return None
        return self._insert_with_fresh_id(
            "candidate",
            lambda record_id: Candidate(
                id=record_id,
                job_id=job_id,
                name=name.strip(),
                email=email,
                phone=phone,
                resume_text=resume_text,
                status=lifecycle.initial_status(status),
                notes=notes,
                created_at=_now(),
            ),
            self._store.add_candidate,
        )

    def delete_candidate(self, candidate_id: str) -> bool:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return False
        self._store.delete_candidate(candidate_id)
        self._notifications.add_toast(f"Deleted candidate {candidate.name}", "success")
        return True

    def update_notes(self, candidate_id: str, notes: str) -> Candidate | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        if candidate.notes == notes:
            return candidate
        return self._store.update_candidate(candidate_id, CandidatePatch(notes=notes))

    # -- status pipeline -------------------------------------------------

    def set_candidate_status(self, candidate_id: str, status: str) -> Candidate | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        return self._store.update_candidate(candidate_id, lifecycle.transition(candidate, status))

    def advance_candidate(self, candidate_id: str) -> Candidate | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        patch = lifecycle.advance(candidate)
        if patch is None:
            self._notifications.add_toast(f"{candidate.name} has no further stage", "info")
            return candidate
        return self._store.update_candidate(candidate_id, patch)

    def reject_candidate(self, candidate_id: str) -> Candidate | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        return self._store.update_candidate(candidate_id, lifecycle.reject(candidate))

    def restore_candidate(self, candidate_id: str) -> Candidate | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        return self._store.update_candidate(candidate_id, lifecycle.restore(candidate))

    # -- agent artifacts attached to candidates --------------------------

    def generate_interview_questions(
        self,
        candidate_id: str,
        tone: str = DEFAULT_TONE,
    ) -> InterviewQuestions | None:
        found = self._find_candidate_with_job(candidate_id)
        if found is None:
            return None
        candidate, job = found
        analysis = candidate.ai_analysis
        if analysis is None:
            self._notifications.add_toast("Screen the candidate before generating questions", "error")
            return None

        questions = self._run_agent(
            "interview_questions",
            candidate_id,
            "Failed to generate questions",
            lambda: self._agents.generate_interview_questions(job, analysis, tone),
        )
        if questions is None:
            return None
        if not self._attach(candidate_id, "interview_questions", CandidatePatch(interview_questions=questions)):
            return None
        self._notifications.add_notification(
            "Questions Generated", f"Interview guide created for {candidate.name}", "success"
        )
        self._notifications.add_toast("Interview questions generated!", "success")
        return questions

    def estimate_salary(self, candidate_id: str) -> SalaryEstimationResult | None:
        found = self._find_candidate_with_job(candidate_id)
        if found is None:
            return None
        _, job = found

        result = self._run_agent(
            "estimate_salary",
            candidate_id,
            "Failed to estimate salary",
            lambda: self._agents.estimate_salary(job.title, job.location, job.seniority, job.skills_required),
        )
        if result is None:
            return None
        if not self._attach(candidate_id, "estimate_salary", CandidatePatch(salary_estimation=result)):
            return None
        self._notifications.add_notification("Salary Estimated", "Market range analysis completed", "success")
        self._notifications.add_toast("Salary range estimated!", "success")
        return result

    def check_background(self, candidate_id: str) -> BackgroundCheckResult | None:
        found = self._find_candidate_with_job(candidate_id)
        if found is None:
            return None
        candidate, job = found

        result = self._run_agent(
            "background_check",
            candidate_id,
            "Failed to run background check",
            lambda: self._agents.check_background_risk(candidate.name, candidate.resume_text, job.title),
        )
        if result is None:
            return None
        if not self._attach(candidate_id, "background_check", CandidatePatch(background_check=result)):
            return None
        self._notifications.add_notification("Risk Check Complete", "Preliminary screening finished", "info")
        self._notifications.add_toast("Background check analysis complete", "info")
        return result

    def generate_offer(
        self,
        candidate_id: str,
        salary: str,
        start_date: str,
        benefits: str = DEFAULT_BENEFITS,
    ) -> OfferResult | None:
        found = self._find_candidate_with_job(candidate_id)
        if found is None:
            return None
        candidate, job = found

        offer = self._run_agent(
            "generate_offer",
            candidate_id,
            "Failed to generate offer",
            lambda: self._agents.write_offer(candidate.name, job.title, salary, start_date, benefits),
        )
        if offer is None:
            return None
        if not self._attach(candidate_id, "generate_offer", lifecycle.offer_patch(offer)):
            return None
        self._notifications.add_notification("Offer Ready", "Offer letter generated successfully", "success")
        self._notifications.add_toast("Offer letter generated!", "success")
        return offer

    # -- session-wide ----------------------------------------------------

    def load_demo_data(self) -> None:
        self._store.load_demo_snapshot()
        self._notifications.add_toast("Demo data loaded", "success")

    def reset_usage(self) -> None:
        self._store.reset_usage()

    def search(self, query: str) -> SearchResults:
        return self._search.search(self._store, query)

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(self._store, usage_limit=self._usage_limit)

    def next_onboarding_step(self) -> int:
        """Manual "next" in the guided flow: review (3) -> prep (4), done (5) -> off."""
        onboarding = self._store.onboarding
        if onboarding.step == 3:
            self._store.set_onboarding_step(4)
        elif onboarding.step == 5:
            self._store.skip_onboarding()
        return onboarding.step

    def skip_onboarding(self) -> None:
        self._store.skip_onboarding()

    # -- helpers ---------------------------------------------------------

    @contextmanager
    def _mark_in_flight(self, action: str, subject_id: str | None) -> Iterator[None]:
        key = (action, subject_id)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    def _run_agent(
        self,
        action: str,
        subject_id: str | None,
        failure_message: str,
        call: Callable[[], T],
    ) -> T | None:
        with self._mark_in_flight(action, subject_id):
            try:
                result = call()
            except StructuredGenerationError as exc:
                self._logger.warning(
                    "agent.call_failed",
                    action=action,
                    subject_id=subject_id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                self._notifications.add_toast(failure_message, "error")
                return None
        self._store.increment_usage()
        return result

    def _insert_with_fresh_id(self, kind: str, build: Callable[[str], R], insert: Callable[[R], R]) -> R | None:
        """Insert a freshly built record, drawing a second id once on collision."""
        for attempt in (1, 2):
            try:
                return insert(build(self._new_id()))
            except DuplicateIdError as exc:
                self._logger.warning(
                    "workspace.id_collision", kind=kind, record_id=exc.record_id, attempt=attempt
                )
        self._notifications.add_toast(f"Could not save the {kind}. Please try again.", "error")
        return None

    def _attach(self, candidate_id: str, action: str, patch: CandidatePatch) -> bool:
        if self._store.update_candidate(candidate_id, patch) is None:
            self._logger.info("workspace.result_discarded", action=action, candidate_id=candidate_id)
            return False
        return True

    def _find_candidate(self, candidate_id: str) -> Candidate | None:
        candidate = self._store.get_candidate(candidate_id)
        if candidate is None:
            self._notifications.add_toast("Candidate not found", "error")
        return candidate

    def _find_candidate_with_job(self, candidate_id: str) -> tuple[Candidate, Job] | None:
        candidate = self._find_candidate(candidate_id)
        if candidate is None:
            return None
        job = self._store.get_job(candidate.job_id)
        if job is None:
            self._notifications.add_toast("Job not found", "error")
            return None
        return candidate, job


def _clean_list(values: Sequence[str]) -> list[str]:
    return [value.strip() for value in values if value and value.strip()]


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()


__all__ = ["RecruitingWorkspace"]
