"""Tests for container wiring."""

import asyncio

from kcalcal.config import Settings
from kcalcal.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.analysis_service.client is not None
    assert container.model_catalog_service.client is not None
    assert container.rate_limiter.default_limit == 10
    asyncio.run(container.close_resources())


def test_build_container_without_api_key_leaves_clients_unset(
    settings: Settings,
) -> None:
    container = build_container(settings.model_copy(update={"gemini_api_key": None}))

    assert container.analysis_service.client is None
    assert container.model_catalog_service.client is None
    asyncio.run(container.close_resources())
