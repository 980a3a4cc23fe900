"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitlog.adapters.openai_analysis_client import OpenAIAnalysisClient
from fitlog.adapters.supabase_kv_store import SupabaseKeyValueStore
from fitlog.config import Settings, parse_timezone
from fitlog.services.analysis import AnalysisService
from fitlog.services.storage import InMemoryKeyValueStore, KeyValueStore, TrackerState
from fitlog.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: TrackerService
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by the settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "Supabase storage requires SUPABASE_URL and SUPABASE_SERVICE_KEY"
        )
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseKeyValueStore(
        client=client, owner_id=settings.owner_id, table=settings.supabase_table
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    tracker_service = TrackerService(
        state=TrackerState(build_store(resolved_settings)),
        timezone_name=parse_timezone(resolved_settings.timezone),
    )
    openai_client = OpenAIAnalysisClient.create(
        resolved_settings.openai_api_key or "", store=resolved_settings.openai_store
    )
    analysis_service = AnalysisService(
        client=openai_client,
        text_model=resolved_settings.openai_text_model,
        image_model=resolved_settings.openai_image_model,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
