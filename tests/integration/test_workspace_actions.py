from __future__ import annotations

import itertools
from typing import Any, Callable

import pendulum

from smarthire.agents import RecruitingAgents
from smarthire.core import EntityStore, NotificationCenter
from smarthire.llm import LLMRequestError
from smarthire.storage import MemoryKeyValueStore
from smarthire.workspace import RecruitingWorkspace

SCREENING = {
    "skills_detected": ["React", "TypeScript"],
    "experience_years": 6,
    "fit_score": 88,
    "recommendation": "strong_fit",
    "strengths": ["Deep React"],
    "gaps": ["Backend"],
    "summary": "Strong frontend engineer.",
}
QUESTIONS = {"technical": ["Explain reconciliation"], "behavioral": ["Hard feedback?"], "culture": ["Ideal team?"]}
OFFER = {"offer_letter": "Dear Ana", "email_copy": "Hi Ana", "next_steps": ["Sign"]}
SALARY = {"estimated_range": "$140k - $170k", "market_factors": ["Remote"], "justification": "Senior role."}
BACKGROUND = {"risk_assessment": "low", "concerns": [], "summary": "Nothing unusual."}

RESPONSES_BY_FIRST_FIELD = {
    "skills_detected": SCREENING,
    "technical": QUESTIONS,
    "offer_letter": OFFER,
    "estimated_range": SALARY,
    "risk_assessment": BACKGROUND,
}


class FakeClock:
    def __init__(self) -> None:
        self.now = pendulum.datetime(2024, 5, 1, 9, 0, 0)

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def tick(self, seconds: int) -> None:
        self.now = self.now.add(seconds=seconds)


class StubGenerator:
    """Answers by schema; ``hook`` runs inside the call before returning."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.hook: Callable[[], None] | None = None
        self.calls = 0

    def generate(self, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
        self.calls += 1
        if self.hook is not None:
            self.hook()
        if self.error is not None:
            raise self.error
        first_field = next(iter(schema["properties"]))
        return dict(RESPONSES_BY_FIRST_FIELD[first_field])


def build_workspace(
    id_factory: Callable[[], str] | None = None,
) -> tuple[RecruitingWorkspace, StubGenerator, FakeClock]:
    generator = StubGenerator()
    clock = FakeClock()
    counter = itertools.count(1)
    workspace = RecruitingWorkspace(
        store=EntityStore.open(MemoryKeyValueStore()),
        notifications=NotificationCenter(clock=clock),
        agents=RecruitingAgents(generator),
        id_factory=id_factory or (lambda: f"id{next(counter)}"),
    )
    return workspace, generator, clock


def toast_messages(workspace: RecruitingWorkspace) -> list[str]:
    return [toast.message for toast in workspace.notifications.toasts]


def screened_candidate(workspace: RecruitingWorkspace) -> str:
    job = workspace.create_job("Senior Frontend Engineer", location="Remote", skills=["React"])
    candidate = workspace.screen_candidate(job.id, "Ana Lima", "React for 6 years", email="ana@example.com")
    return candidate.id


def test_screening_stores_screened_candidate():
    workspace, _, _ = build_workspace()
    job = workspace.create_job("Senior Frontend Engineer", skills=["React", " ", "TypeScript"])

    candidate = workspace.screen_candidate(job.id, "  Ana Lima ", "React for 6 years")

    assert job.skills_required == ["React", "TypeScript"]
    assert candidate.name == "Ana Lima"
    assert candidate.status == "screened"
    assert candidate.ai_analysis.fit_score == 88
    assert workspace.store.get_candidate(candidate.id) == candidate
    assert workspace.store.usage_count == 1
    assert workspace.store.onboarding.step == 3


def test_screening_failure_becomes_error_toast():
    workspace, generator, _ = build_workspace()
    job = workspace.create_job("Engineer")
    generator.error = LLMRequestError("offline")

    assert workspace.screen_candidate(job.id, "Ana", "resume") is None

    assert workspace.store.candidates == ()
    assert workspace.store.usage_count == 0
    toast = workspace.notifications.toasts[-1]
    assert toast.message == "Screening failed. Please check API key and try again."
    assert toast.severity == "error"


def test_screening_requires_all_fields():
    workspace, generator, _ = build_workspace()
    job = workspace.create_job("Engineer")

    assert workspace.screen_candidate(job.id, "Ana", "   ") is None

    assert generator.calls == 0
    assert "Please fill in all fields." in toast_messages(workspace)


def test_screening_result_dropped_when_job_deleted_meanwhile():
    workspace, generator, _ = build_workspace()
    job = workspace.create_job("Engineer")
    generator.hook = lambda: workspace.store.delete_job(job.id)

    assert workspace.screen_candidate(job.id, "Ana", "resume") is None
    assert workspace.store.candidates == ()


def test_offer_attaches_letter_and_moves_to_offer():
    workspace, _, _ = build_workspace()
    candidate_id = screened_candidate(workspace)

    offer = workspace.generate_offer(candidate_id, "$150k", "2024-07-01")

    stored = workspace.store.get_candidate(candidate_id)
    assert offer.offer_letter == "Dear Ana"
    assert stored.offer_data == offer
    assert stored.status == "offer"
    assert workspace.notifications.notifications[0].title == "Offer Ready"
    assert "Offer letter generated!" in toast_messages(workspace)


def test_questions_need_a_screening_first():
    workspace, generator, _ = build_workspace()
    job = workspace.create_job("Engineer")
    candidate = workspace.add_candidate(job.id, "Ana")

    assert workspace.generate_interview_questions(candidate.id) is None

    assert generator.calls == 0
    assert "Screen the candidate before generating questions" in toast_messages(workspace)


def test_action_is_busy_only_while_running():
    workspace, generator, _ = build_workspace()
    candidate_id = screened_candidate(workspace)
    seen: list[bool] = []
    generator.hook = lambda: seen.append(workspace.is_busy("interview_questions", candidate_id))

    questions = workspace.generate_interview_questions(candidate_id, "Friendly & Casual")

    assert questions.technical == ["Explain reconciliation"]
    assert seen == [True]
    assert not workspace.is_busy("interview_questions", candidate_id)


def test_result_for_deleted_candidate_is_discarded():
    workspace, generator, _ = build_workspace()
    candidate_id = screened_candidate(workspace)
    generator.hook = lambda: workspace.store.delete_candidate(candidate_id)

    assert workspace.estimate_salary(candidate_id) is None

    assert workspace.store.get_candidate(candidate_id) is None
    assert all(item.title != "Salary Estimated" for item in workspace.notifications.notifications)


def test_salary_and_background_results_are_attached():
    workspace, _, _ = build_workspace()
    candidate_id = screened_candidate(workspace)

    workspace.estimate_salary(candidate_id)
    workspace.check_background(candidate_id)

    stored = workspace.store.get_candidate(candidate_id)
    assert stored.salary_estimation.estimated_range == "$140k - $170k"
    assert stored.background_check.risk_assessment == "low"
    assert [item.title for item in workspace.notifications.notifications] == [
        "Risk Check Complete",
        "Salary Estimated",
    ]
    assert workspace.notifications.unread_count == 2


def test_status_actions():
    workspace, _, _ = build_workspace()
    candidate_id = screened_candidate(workspace)

    assert workspace.advance_candidate(candidate_id).status == "interviewing"
    assert workspace.advance_candidate(candidate_id).status == "offer"
    assert workspace.advance_candidate(candidate_id).status == "offer"
    assert "Ana Lima has no further stage" in toast_messages(workspace)

    assert workspace.reject_candidate(candidate_id).status == "rejected"
    assert workspace.restore_candidate(candidate_id).status == "new"
    assert workspace.set_candidate_status(candidate_id, "offer").status == "offer"


def test_missing_records_produce_toasts():
    workspace, _, _ = build_workspace()

    assert workspace.delete_job("nope") is False
    assert workspace.reject_candidate("nope") is None

    assert toast_messages(workspace) == ["Job not found", "Candidate not found"]


def test_delete_job_toast_and_cascade():
    workspace, _, _ = build_workspace()
    candidate_id = screened_candidate(workspace)
    job_id = workspace.store.get_candidate(candidate_id).job_id

    assert workspace.delete_job(job_id) is True

    assert workspace.store.candidates == ()
    assert 'Job "Senior Frontend Engineer" deleted' in toast_messages(workspace)


def test_toasts_dismiss_themselves():
    workspace, _, clock = build_workspace()
    workspace.create_job("Engineer")
    assert toast_messages(workspace) == ['Job "Engineer" created']

    clock.tick(4)

    assert toast_messages(workspace) == []


def test_guided_flow_from_first_job_to_interview_prep():
    workspace, _, _ = build_workspace()
    assert workspace.store.onboarding.step == 1

    candidate_id = screened_candidate(workspace)
    assert workspace.store.onboarding.step == 3

    assert workspace.next_onboarding_step() == 4
    workspace.generate_interview_questions(candidate_id)
    assert workspace.store.onboarding.step == 5
    assert workspace.store.onboarding.completed

    assert workspace.next_onboarding_step() == 0


def test_update_notes_and_demo_data():
    workspace, _, _ = build_workspace()
    workspace.load_demo_data()

    updated = workspace.update_notes("c2", "Phone screen booked")

    assert updated.notes == "Phone screen booked"
    assert "Demo data loaded" in toast_messages(workspace)
    assert [item.id for item in workspace.search("john").candidates] == ["c2"]


def test_id_collision_draws_a_new_id_once():
    ids = iter(["dup", "dup", "fresh", "dup", "dup"])
    workspace, _, _ = build_workspace(id_factory=lambda: next(ids))

    first = workspace.create_job("Engineer")
    second = workspace.create_job("Designer")
    third = workspace.create_job("Writer")

    assert first.id == "dup"
    assert second.id == "fresh"
    assert third is None
    assert [job.id for job in workspace.store.jobs] == ["fresh", "dup"]
    assert "Could not save the job. Please try again." in toast_messages(workspace)


def test_candidate_id_collision_becomes_error_toast():
    ids = iter(["job", "c1", "c1", "c1"])
    workspace, _, _ = build_workspace(id_factory=lambda: next(ids))
    job = workspace.create_job("Engineer")
    workspace.add_candidate(job.id, "Ana")

    assert workspace.screen_candidate(job.id, "Bo", "resume") is None

    assert [item.name for item in workspace.store.candidates] == ["Ana"]
    assert "Could not save the candidate. Please try again." in toast_messages(workspace)
