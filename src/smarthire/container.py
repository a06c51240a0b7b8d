"""Dependency injection container for a recruiting session."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .agents import RecruitingAgents
from .core import EntityStore, NotificationCenter, SearchConfig, StoreSearch
from .core.notifications import DEFAULT_TOAST_TTL_SECONDS
from .core.search import DEFAULT_USAGE_LIMIT
from .llm import DEFAULT_BASE_URL, DEFAULT_MODEL, GeminiClient, StructuredGenerator, api_key_from_env
from .storage import FileKeyValueStore, KeyValueStore
from .workspace import RecruitingWorkspace

DEFAULT_STATE_DIR = "~/.smarthire"

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "storage": {"path": DEFAULT_STATE_DIR},
    "llm": {
        "model": DEFAULT_MODEL,
        "base_url": DEFAULT_BASE_URL,
        "timeout": 30.0,
        "api_key": None,
    },
    "notifications": {"toast_ttl_seconds": DEFAULT_TOAST_TTL_SECONDS},
    "usage": {"limit": DEFAULT_USAGE_LIMIT},
    "search": {"min_similarity": 85.0},
}


class RecruitingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    storage = providers.Singleton(FileKeyValueStore, directory=config.storage.path)

    entity_store = providers.Singleton(EntityStore.open, storage=storage)

    notification_center = providers.Singleton(
        NotificationCenter,
        toast_ttl_seconds=config.notifications.toast_ttl_seconds,
    )

    llm_client = providers.Singleton(
        GeminiClient,
        api_key=config.llm.api_key,
        model=config.llm.model,
        base_url=config.llm.base_url,
        timeout=config.llm.timeout,
    )

    agents = providers.Singleton(RecruitingAgents, generator=llm_client)

    store_search = providers.Singleton(
        StoreSearch,
        config=providers.Factory(SearchConfig, min_similarity=config.search.min_similarity),
    )

    workspace = providers.Factory(
        RecruitingWorkspace,
        store=entity_store,
        notifications=notification_center,
        agents=agents,
        search=store_search,
        usage_limit=config.usage.limit,
    )


def create_container(
    *,
    settings: dict | None = None,
    storage: KeyValueStore | None = None,
    generator: StructuredGenerator | None = None,
) -> RecruitingContainer:
    """Instantiate container with optional overrides."""

    container = RecruitingContainer()

    merged = _merge_settings(DEFAULT_SETTINGS, settings if isinstance(settings, dict) else {})
    if not merged["llm"].get("api_key"):
        merged["llm"]["api_key"] = api_key_from_env()
    container.config.from_dict(merged)

    if storage is not None:
        container.storage.override(providers.Object(storage))

    if generator is not None:
        container.llm_client.override(providers.Object(generator))

    return container


def _merge_settings(defaults: dict[str, dict[str, Any]], overrides: dict[str, Any]) -> dict[str, dict[str, Any]]:
    merged = {section: dict(values) for section, values in defaults.items()}
    for section, values in overrides.items():
        if isinstance(values, dict):
            merged.setdefault(section, {}).update(
                {key: value for key, value in values.items() if value is not None}
            )
    return merged


__all__ = ["DEFAULT_SETTINGS", "RecruitingContainer", "create_container"]
