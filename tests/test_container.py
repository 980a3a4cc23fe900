"""Tests for container wiring."""

import asyncio

import pytest

from fitlog.config import Settings
from fitlog.containers import build_container, build_store
from fitlog.services.storage import InMemoryKeyValueStore


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.tracker_service is not None
    assert container.analysis_service.text_model == settings.openai_text_model
    assert isinstance(container.tracker_service.state.store, InMemoryKeyValueStore)
    asyncio.run(container.close_resources())


def test_build_container_falls_back_to_utc_for_unknown_timezone() -> None:
    container = build_container(
        Settings(storage_backend="memory", timezone="Mars/Olympus")
    )

    assert container.tracker_service.timezone_name == "UTC"
    asyncio.run(container.close_resources())


def test_supabase_store_requires_credentials() -> None:
    settings = Settings(
        storage_backend="supabase", supabase_url=None, supabase_service_key=None
    )

    with pytest.raises(ValueError, match="SUPABASE_URL"):
        build_store(settings)
