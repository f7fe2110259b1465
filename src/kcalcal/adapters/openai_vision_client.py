"""OpenAI-compatible chat completions client for vision analysis."""

from dataclasses import dataclass

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from kcalcal.services.analysis import UpstreamError, VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by an OpenAI-compatible endpoint (Gemini by default)."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float
    ) -> "OpenAIVisionClient":
        """Create a client with a bounded request timeout and no retries."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout_seconds,
                max_retries=0,
            )
        )

    async def generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str:
        """Send the prompt and optional image, returning the text answer."""
        content: list[dict[str, object]] = [{"type": "text", "text": prompt}]
        if image_data_url:
            content.append(
                {"type": "image_url", "image_url": {"url": image_data_url}}
            )
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": content}],
            )
        except APIStatusError as exc:
            raise UpstreamError(exc.message, status_code=exc.status_code) from exc
        except APITimeoutError as exc:
            raise UpstreamError("Model request timed out", status_code=504) from exc
        except APIConnectionError as exc:
            raise UpstreamError(str(exc), status_code=502) from exc

        if not response.choices:
            raise UpstreamError("Model returned no choices", status_code=502)
        output_text = response.choices[0].message.content
        if not output_text:
            raise UpstreamError("Model returned an empty response", status_code=502)
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
