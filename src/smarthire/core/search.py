"""Global search and dashboard figures over the entity store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from rapidfuzz import fuzz

from ..schemas import Candidate, Job
from .store import EntityStore

DEFAULT_USAGE_LIMIT = 30


@dataclass
class SearchConfig:
    """Configuration for fuzzy search fallback."""

    min_similarity: float = 85.0


@dataclass(slots=True)
class SearchResults:
    jobs: list[Job] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.jobs or self.candidates)


@dataclass(slots=True)
class DashboardSummary:
    active_jobs: int
    screened: int
    offers_ready: int
    candidates_per_job: list[tuple[str, int]]
    usage_count: int
    usage_limit: int

    @property
    def usage_ratio(self) -> float:
        if self.usage_limit <= 0:
            return 1.0
        return min(self.usage_count / self.usage_limit, 1.0)


class StoreSearch:
    """Match jobs by title or location and candidates by name or email."""

    def __init__(self, *, config: SearchConfig | None = None) -> None:
        self._config = config or SearchConfig()

    def search(self, store: EntityStore, query: str) -> SearchResults:
        needle = query.strip().lower()
        if not needle:
            return SearchResults()
        return SearchResults(
            jobs=[job for job in store.jobs if self._matches(needle, (job.title, job.location))],
            candidates=[
                item for item in store.candidates if self._matches(needle, (item.name, item.email))
            ],
        )

    def _matches(self, needle: str, fields: Iterable[str]) -> bool:
        for text in fields:
            haystack = text.lower()
            if not haystack:
                continue
            if needle in haystack:
                return True
            if len(needle) >= 3 and fuzz.partial_ratio(needle, haystack) >= self._config.min_similarity:
                return True
        return False


def dashboard_summary(store: EntityStore, *, usage_limit: int = DEFAULT_USAGE_LIMIT) -> DashboardSummary:
    candidates = store.candidates
    per_job = [
        (job.title, sum(1 for item in candidates if item.job_id == job.id))
        for job in store.jobs[:5]
    ]
    return DashboardSummary(
        active_jobs=sum(1 for job in store.jobs if job.status == "active"),
        screened=sum(1 for item in candidates if item.status != "new"),
        offers_ready=sum(1 for item in candidates if item.status == "offer"),
        candidates_per_job=per_job,
        usage_count=store.usage_count,
        usage_limit=usage_limit,
    )
