"""Gemini REST client for listing available models."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ModelsClient(Protocol):
    """Interface for model listing."""

    async def list_models(self) -> dict[str, object]:
        """Return the raw model listing payload."""


@dataclass
class HttpxGeminiModelsClient(ModelsClient):
    """HTTPX-backed Gemini models client."""

    api_key: str
    models_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, models_url: str) -> "HttpxGeminiModelsClient":
        """Create a models client with a managed httpx session."""
        return cls(
            api_key=api_key, models_url=models_url, http_client=httpx.AsyncClient()
        )

    async def list_models(self) -> dict[str, object]:
        """Fetch available models."""
        response = await self.http_client.get(
            self.models_url,
            params={"key": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
