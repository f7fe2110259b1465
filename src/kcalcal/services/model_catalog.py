"""Lookup of models the configured provider offers."""

import logging
from dataclasses import dataclass

import httpx

from kcalcal.adapters.gemini_models_client import ModelsClient
from kcalcal.domain.analysis import AnalysisFailure

_logger = logging.getLogger(__name__)


@dataclass
class ModelCatalogService:
    """Service returning the provider's model list or a structured failure."""

    client: ModelsClient | None

    async def list_models(self) -> list[dict[str, object]] | AnalysisFailure:
        """Return the available models."""
        if self.client is None:
            return AnalysisFailure(error="API key is not set", status_code=500)
        try:
            payload = await self.client.list_models()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            _logger.warning("Model listing failed: status=%s", status_code)
            reason = exc.response.reason_phrase
            return AnalysisFailure(
                error=f"Model listing failed: {status_code} {reason}",
                status_code=502,
            )
        except httpx.HTTPError as exc:
            _logger.warning("Model listing failed: %s", exc)
            return AnalysisFailure(
                error="Failed to fetch the model list", status_code=502
            )
        models = payload.get("models", [])
        return models if isinstance(models, list) else []
