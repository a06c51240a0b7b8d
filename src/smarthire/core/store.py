"""Authoritative in-memory job and candidate collections."""

from __future__ import annotations

import json
from typing import Any, Iterable

import structlog
from pydantic import TypeAdapter, ValidationError

from ..schemas import Candidate, CandidatePatch, Job, apply_patch
from ..storage import KeyValueStore
from . import lifecycle
from .demo import demo_candidates, demo_jobs
from .onboarding import FINAL_STEP, INACTIVE_STEP, OnboardingProgress

JOBS_KEY = "smarthire_jobs"
CANDIDATES_KEY = "smarthire_candidates"
USAGE_KEY = "smarthire_usage"
ONBOARDING_KEY = "smarthire_onboarding_completed"
ONBOARDING_STEP_KEY = "smarthire_onboarding_step"

_JOBS_ADAPTER = TypeAdapter(list[Job])
_CANDIDATES_ADAPTER = TypeAdapter(list[Candidate])


class DuplicateIdError(ValueError):
    """Raised when inserting a record whose identifier is already taken."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id!r} already exists")
        self.kind = kind
        self.record_id = record_id


class UnknownJobError(LookupError):
    """Raised when a candidate references a job the store does not hold."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id!r} does not exist")
        self.job_id = job_id


class EntityStore:
    """Single owner of jobs, candidates, the usage counter and onboarding.

    Collections are kept most-recent-first. Every mutation of jobs,
    candidates or usage rewrites the whole snapshot to the backing key-value
    store; a failed write is logged and the in-memory state stays
    authoritative.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        jobs: Iterable[Job] = (),
        candidates: Iterable[Candidate] = (),
        usage_count: int = 0,
        onboarding: OnboardingProgress | None = None,
    ) -> None:
        self._storage = storage
        self._jobs: list[Job] = list(jobs)
        self._candidates: list[Candidate] = list(candidates)
        self._usage_count = usage_count
        self._onboarding = onboarding or OnboardingProgress()
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def open(cls, storage: KeyValueStore) -> "EntityStore":
        """Restore a store from ``storage``; unreadable entries count as empty."""
        logger = structlog.get_logger(__name__)
        jobs = _read_entry(storage, JOBS_KEY, _JOBS_ADAPTER, logger) or []
        candidates = _read_entry(storage, CANDIDATES_KEY, _CANDIDATES_ADAPTER, logger) or []
        job_ids = {job.id for job in jobs}
        orphans = [item.id for item in candidates if item.job_id not in job_ids]
        if orphans:
            logger.warning("store.orphans_dropped", candidate_ids=orphans)
            candidates = [item for item in candidates if item.job_id in job_ids]
        usage_count = _read_usage(storage, logger)
        completed = _read_text(storage, ONBOARDING_KEY, logger) == "true"
        step = _read_step(storage, logger)

        onboarding = OnboardingProgress(completed=completed)
        if not completed and not jobs:
            onboarding.set_step(1)
        elif step is not None and (not completed or step == FINAL_STEP):
            onboarding.set_step(step)

        logger.info(
            "store.restored",
            jobs=len(jobs),
            candidates=len(candidates),
            usage_count=usage_count,
            onboarding_step=onboarding.step,
        )
        return cls(
            storage,
            jobs=jobs,
            candidates=candidates,
            usage_count=usage_count,
            onboarding=onboarding,
        )

    # -- reads -----------------------------------------------------------

    @property
    def jobs(self) -> tuple[Job, ...]:
        return tuple(self._jobs)

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return tuple(self._candidates)

    @property
    def usage_count(self) -> int:
        return self._usage_count

    @property
    def onboarding(self) -> OnboardingProgress:
        return self._onboarding

    def get_job(self, job_id: str) -> Job | None:
        return next((job for job in self._jobs if job.id == job_id), None)

    def get_candidate(self, candidate_id: str) -> Candidate | None:
        return next((item for item in self._candidates if item.id == candidate_id), None)

    def candidates_for_job(self, job_id: str, status_filter: str = "any") -> list[Candidate]:
        """Candidates of one job.

        ``any`` returns all of them, ``all`` hides rejected ones (the default
        pipeline view), any status name narrows to that status.
        """
        selected = [item for item in self._candidates if item.job_id == job_id]
        return _filter_by_status(selected, status_filter)

    def filter_candidates(self, status_filter: str = "any") -> list[Candidate]:
        return _filter_by_status(list(self._candidates), status_filter)

    # -- jobs ------------------------------------------------------------

    def add_job(self, job: Job) -> Job:
        if self.get_job(job.id) is not None:
            raise DuplicateIdError("Job", job.id)
        self._jobs.insert(0, job)
        self._onboarding.advance_from(1)
        self._logger.info("store.job_added", job_id=job.id, title=job.title)
        self._persist()
        return job

    def delete_job(self, job_id: str) -> int:
        """Remove a job and cascade to its candidates; returns candidates removed."""
        if self.get_job(job_id) is None:
            return 0
        self._jobs = [job for job in self._jobs if job.id != job_id]
        remaining = [item for item in self._candidates if item.job_id != job_id]
        removed = len(self._candidates) - len(remaining)
        self._candidates = remaining
        self._logger.info("store.job_deleted", job_id=job_id, candidates_removed=removed)
        self._persist()
        return removed

    # -- candidates ------------------------------------------------------

    def add_candidate(self, candidate: Candidate) -> Candidate:
        if self.get_candidate(candidate.id) is not None:
            raise DuplicateIdError("Candidate", candidate.id)
        if self.get_job(candidate.job_id) is None:
            raise UnknownJobError(candidate.job_id)
        self._candidates.insert(0, candidate)
        self._onboarding.advance_from(2)
        self._logger.info(
            "store.candidate_added",
            candidate_id=candidate.id,
            job_id=candidate.job_id,
            status=candidate.status,
        )
        self._persist()
        return candidate

    def update_candidate(self, candidate_id: str, patch: CandidatePatch) -> Candidate | None:
        """Merge ``patch`` into a candidate; unknown ids are ignored."""
        for index, existing in enumerate(self._candidates):
            if existing.id == candidate_id:
                break
        else:
            self._logger.debug("store.candidate_missing", candidate_id=candidate_id)
            return None

        updated = apply_patch(existing, patch)
        self._candidates[index] = updated
        if "interview_questions" in patch.model_fields_set and patch.interview_questions is not None:
            self._onboarding.advance_from(4)
        self._logger.info(
            "store.candidate_updated",
            candidate_id=candidate_id,
            fields=sorted(patch.model_fields_set),
        )
        self._persist()
        return updated

    def delete_candidate(self, candidate_id: str) -> bool:
        remaining = [item for item in self._candidates if item.id != candidate_id]
        if len(remaining) == len(self._candidates):
            return False
        self._candidates = remaining
        self._logger.info("store.candidate_deleted", candidate_id=candidate_id)
        self._persist()
        return True

    def load_demo_snapshot(self) -> None:
        """Prepend the sample records, skipping any id already present."""
        jobs = [job for job in demo_jobs() if self.get_job(job.id) is None]
        candidates = [item for item in demo_candidates() if self.get_candidate(item.id) is None]
        self._jobs = jobs + self._jobs
        self._candidates = candidates + self._candidates
        self._logger.info("store.demo_loaded", jobs=len(jobs), candidates=len(candidates))
        self._persist()

    # -- usage and onboarding --------------------------------------------

    def increment_usage(self) -> int:
        self._usage_count += 1
        self._persist()
        return self._usage_count

    def reset_usage(self) -> None:
        self._usage_count = 0
        self._persist()

    def set_onboarding_step(self, step: int) -> None:
        self._onboarding.set_step(step)
        self._persist_onboarding()

    def skip_onboarding(self) -> None:
        self._onboarding.skip()
        self._persist_onboarding()

    # -- persistence -----------------------------------------------------

    def snapshot(self) -> dict[str, bytes]:
        """Serialized form of every persisted entry, keyed by storage key."""
        return {
            JOBS_KEY: _JOBS_ADAPTER.dump_json(self._jobs),
            CANDIDATES_KEY: _CANDIDATES_ADAPTER.dump_json(self._candidates),
            USAGE_KEY: str(self._usage_count).encode("utf-8"),
        }

    def _persist(self) -> None:
        try:
            for key, value in self.snapshot().items():
                self._storage.set(key, value)
        except OSError as exc:
            self._logger.warning("store.persist_failed", error=str(exc))
        self._persist_onboarding()

    def _persist_onboarding(self) -> None:
        """Write the current step, plus the completed flag once it is set."""
        entries = {ONBOARDING_STEP_KEY: str(self._onboarding.step).encode("utf-8")}
        if self._onboarding.completed:
            entries[ONBOARDING_KEY] = b"true"
        try:
            for key, value in entries.items():
                self._storage.set(key, value)
        except OSError as exc:
            self._logger.warning("store.persist_failed", key=key, error=str(exc))


def _filter_by_status(candidates: list[Candidate], status_filter: str) -> list[Candidate]:
    if status_filter == "any":
        return candidates
    if status_filter == "all":
        return [item for item in candidates if lifecycle.is_active(item.status)]
    status = lifecycle.validate_status(status_filter)
    return [item for item in candidates if item.status == status]


def _read_text(storage: KeyValueStore, key: str, logger: Any) -> str | None:
    try:
        raw = storage.get(key)
    except OSError as exc:
        logger.warning("store.restore_failed", key=key, error=str(exc))
        return None
    if raw is None:
        return None
    try:
        return raw.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        logger.warning("store.restore_failed", key=key, error=str(exc))
        return None


def _read_entry(storage: KeyValueStore, key: str, adapter: TypeAdapter, logger: Any) -> list | None:
    text = _read_text(storage, key, logger)
    if not text:
        return None
    try:
        return adapter.validate_json(text)
    except (ValidationError, json.JSONDecodeError) as exc:
        logger.warning("store.restore_failed", key=key, error=str(exc))
        return None


def _read_step(storage: KeyValueStore, logger: Any) -> int | None:
    text = _read_text(storage, ONBOARDING_STEP_KEY, logger)
    if not text:
        return None
    try:
        step = int(text)
    except ValueError:
        step = -1
    if not INACTIVE_STEP <= step <= FINAL_STEP:
        logger.warning("store.restore_failed", key=ONBOARDING_STEP_KEY, error=f"invalid onboarding step {text!r}")
        return None
    return step


def _read_usage(storage: KeyValueStore, logger: Any) -> int:
    text = _read_text(storage, USAGE_KEY, logger)
    if not text:
        return 0
    try:
        value = int(text)
    except ValueError:
        logger.warning("store.restore_failed", key=USAGE_KEY, error=f"invalid usage counter {text!r}")
        return 0
    return max(value, 0)


__all__ = [
    "CANDIDATES_KEY",
    "DuplicateIdError",
    "EntityStore",
    "JOBS_KEY",
    "ONBOARDING_KEY",
    "ONBOARDING_STEP_KEY",
    "USAGE_KEY",
    "UnknownJobError",
]
