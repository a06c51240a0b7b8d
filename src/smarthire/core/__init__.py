"""Core recruiting state: entity store, status pipeline, notifications."""

from __future__ import annotations

from . import lifecycle
from .notifications import NotificationCenter
from .onboarding import OnboardingProgress
from .search import DashboardSummary, SearchConfig, SearchResults, StoreSearch, dashboard_summary
from .store import DuplicateIdError, EntityStore, UnknownJobError

__all__ = [
    "DashboardSummary",
    "DuplicateIdError",
    "EntityStore",
    "NotificationCenter",
    "OnboardingProgress",
    "SearchConfig",
    "SearchResults",
    "StoreSearch",
    "UnknownJobError",
    "dashboard_summary",
    "lifecycle",
]
