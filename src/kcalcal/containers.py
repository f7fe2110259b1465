"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from kcalcal.adapters.gemini_models_client import HttpxGeminiModelsClient
from kcalcal.adapters.openai_vision_client import OpenAIVisionClient
from kcalcal.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from kcalcal.adapters.supabase_record_repository import SupabaseRecordRepository
from kcalcal.config import Settings
from kcalcal.services.analysis import AnalysisService
from kcalcal.services.backup import BackupService
from kcalcal.services.model_catalog import ModelCatalogService
from kcalcal.services.preferences import PreferencesService
from kcalcal.services.rate_limit import InMemoryRateLimitStore, RateLimiter
from kcalcal.services.records import RecordService
from kcalcal.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    rate_limiter: RateLimiter
    analysis_service: AnalysisService
    model_catalog_service: ModelCatalogService
    record_service: RecordService
    preferences_service: PreferencesService
    stats_service: StatsService
    backup_service: BackupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    record_service = RecordService(SupabaseRecordRepository(supabase_client))
    preferences_service = PreferencesService(
        repository=SupabasePreferencesRepository(supabase_client),
        default_goal_calories=resolved_settings.default_goal_calories,
        default_model=resolved_settings.default_model,
    )

    vision_client: OpenAIVisionClient | None = None
    models_client: HttpxGeminiModelsClient | None = None
    if resolved_settings.gemini_api_key:
        vision_client = OpenAIVisionClient.create(
            api_key=resolved_settings.gemini_api_key,
            base_url=resolved_settings.gemini_base_url,
            timeout_seconds=resolved_settings.analysis_timeout_seconds,
        )
        models_client = HttpxGeminiModelsClient.create(
            api_key=resolved_settings.gemini_api_key,
            models_url=resolved_settings.gemini_models_url,
        )

    async def close_resources() -> None:
        if vision_client is not None:
            await vision_client.close()
        if models_client is not None:
            await models_client.close()

    return AppContainer(
        settings=resolved_settings,
        rate_limiter=RateLimiter(
            store=InMemoryRateLimitStore(),
            default_limit=resolved_settings.daily_rate_limit,
        ),
        analysis_service=AnalysisService(
            client=vision_client, default_model=resolved_settings.default_model
        ),
        model_catalog_service=ModelCatalogService(models_client),
        record_service=record_service,
        preferences_service=preferences_service,
        stats_service=StatsService(
            records=record_service,
            preferences=preferences_service,
            timezone_name=resolved_settings.timezone,
        ),
        backup_service=BackupService(
            records=record_service, preferences=preferences_service
        ),
        close_resources=close_resources,
    )
