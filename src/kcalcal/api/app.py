"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

from kcalcal.api.records import router as records_router
from kcalcal.api.schemas import AnalyzeFoodRequest, SearchNutritionRequest
from kcalcal.app_logging import configure_logging
from kcalcal.containers import AppContainer
from kcalcal.domain.analysis import AnalysisFailure, FoodAnalysis
from kcalcal.domain.rate_limit import RateLimitResult
from kcalcal.services.rate_limit import RateLimiter, resolve_client_identifier


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        sweeper = asyncio.create_task(
            _sweep_rate_limits(
                state_container.rate_limiter,
                state_container.settings.rate_limit_sweep_seconds,
            )
        )
        yield
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(records_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze-food", response_model=None)
    async def analyze_food(
        body: AnalyzeFoodRequest,
        request: Request,
        x_device_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Estimate nutrition for a meal photo within the daily quota."""
        state_container: AppContainer = request.app.state.container
        quota = _check_quota(state_container, x_device_id, request)
        if not quota.success:
            return _quota_exceeded(quota, state_container.settings.timezone)

        service = state_container.analysis_service
        if service.client is None:
            logger.error("Analysis requested but no API key is configured")
            return JSONResponse(
                {"error": "Server configuration error: API key is not set"},
                status_code=500,
            )
        if not body.image_data:
            return JSONResponse({"error": "Image data is required"}, status_code=400)

        model = body.model or state_container.preferences_service.model()
        result = await service.analyze(body.image_data, model=model)
        return _analysis_response(result, quota)

    @app.post("/api/search-nutrition", response_model=None)
    async def search_nutrition(
        body: SearchNutritionRequest,
        request: Request,
        x_device_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Look up nutrition for a named food within the daily quota."""
        state_container: AppContainer = request.app.state.container
        quota = _check_quota(state_container, x_device_id, request)
        if not quota.success:
            return _quota_exceeded(quota, state_container.settings.timezone)

        model = body.model or state_container.preferences_service.model()
        result = await state_container.analysis_service.search_nutrition(
            body.food_name, body.portion_size, model=model
        )
        return _analysis_response(result, quota)

    @app.get("/api/models", response_model=None)
    async def list_models(request: Request) -> JSONResponse:
        """Return the models the provider offers."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.model_catalog_service.list_models()
        if isinstance(result, AnalysisFailure):
            return JSONResponse(result.to_payload(), status_code=result.status_code)
        return JSONResponse({"models": result})

    return app


async def _sweep_rate_limits(limiter: RateLimiter, interval_seconds: int) -> None:
    logger = logging.getLogger(__name__)
    while True:
        await asyncio.sleep(interval_seconds)
        removed = limiter.sweep()
        if removed:
            logger.info("Swept %s expired rate limit entries", removed)


def _check_quota(
    container: AppContainer, device_id: str | None, request: Request
) -> RateLimitResult:
    identifier = resolve_client_identifier(device_id, request.headers)
    return container.rate_limiter.check(identifier)


def _quota_exceeded(quota: RateLimitResult, timezone_name: str) -> JSONResponse:
    reset_at = datetime.fromtimestamp(quota.reset_at / 1000, tz=ZoneInfo(timezone_name))
    return JSONResponse(
        {
            "error": "Daily free analysis limit exceeded.",
            "message": f"Next reset: {reset_at.strftime('%Y-%m-%d %H:%M:%S %Z')}",
            "resetAt": quota.reset_at,
        },
        status_code=429,
        headers=quota.headers(),
    )


def _analysis_response(
    result: FoodAnalysis | AnalysisFailure, quota: RateLimitResult
) -> JSONResponse:
    if isinstance(result, AnalysisFailure):
        return JSONResponse(
            result.to_payload(),
            status_code=result.status_code,
            headers=quota.headers(),
        )
    return JSONResponse(
        result.model_dump(by_alias=True, exclude_none=True),
        headers=quota.headers(),
    )
