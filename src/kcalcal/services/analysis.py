"""Nutrition estimation through an external vision model."""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from kcalcal.domain.analysis import AnalysisFailure, FoodAnalysis

ANALYSIS_PROMPT = """Analyze the food in this photo and estimate its nutrition.

Respond with JSON only, in this shape:
{
  "foodName": "name of the dish",
  "portionSize": "estimated portion, e.g. 1 bowl or 150g",
  "calories": 500,
  "macronutrients": {
    "carbs": 60,
    "protein": 25,
    "fat": 15,
    "sugar": 10
  },
  "confidence": 0.85,
  "description": "short description"
}

Rules:
- if there are several foods, report the combined totals
- macronutrients are grams
- confidence is a number between 0 and 1
- return plain JSON without markdown
- if the photo shows no food, return {"error": "No food detected"}"""

SEARCH_PROMPT_TEMPLATE = """Provide nutrition information for "{food_name}" \
(portion: {portion_size}).

Respond with JSON only, in this shape:
{{
  "foodName": "{food_name}",
  "portionSize": "{portion_size}",
  "calories": 0,
  "macronutrients": {{"carbs": 0, "protein": 0, "fat": 0, "sugar": 0}},
  "confidence": 0.85,
  "description": "source or short note"
}}

All numbers must be integers, not strings. Return plain JSON without markdown."""

DEFAULT_SEARCH_CONFIDENCE = 0.8

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

_logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised by vision clients when the model call fails."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(ValueError):
    """Raised when model output does not contain a JSON object."""


class VisionClient(Protocol):
    """Interface for a model that turns a prompt plus optional image into text."""

    async def generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str:
        """Return the model's raw text answer."""


@dataclass
class AnalysisService:
    """Service that prompts the model and validates its JSON answer."""

    client: VisionClient | None
    default_model: str

    async def analyze(
        self, image_data: str, model: str | None = None
    ) -> FoodAnalysis | AnalysisFailure:
        """Estimate nutrition for a meal photo."""
        text_or_failure = await self._generate(
            model=model or self.default_model,
            prompt=ANALYSIS_PROMPT,
            image_data_url=_to_data_url(image_data),
        )
        if isinstance(text_or_failure, AnalysisFailure):
            return text_or_failure
        return _parse_analysis(text_or_failure)

    async def search_nutrition(
        self, food_name: str, portion_size: str, model: str | None = None
    ) -> FoodAnalysis | AnalysisFailure:
        """Look up nutrition for a named food without a photo."""
        prompt = SEARCH_PROMPT_TEMPLATE.format(
            food_name=food_name, portion_size=portion_size
        )
        text_or_failure = await self._generate(
            model=model or self.default_model, prompt=prompt
        )
        if isinstance(text_or_failure, AnalysisFailure):
            return text_or_failure
        result = _parse_analysis(text_or_failure)
        if isinstance(result, AnalysisFailure):
            return result
        return result.model_copy(
            update={
                "food_name": result.food_name or food_name,
                "portion_size": result.portion_size or portion_size,
                "confidence": result.confidence or DEFAULT_SEARCH_CONFIDENCE,
                "description": result.description or "Nutrition lookup result",
            }
        )

    async def _generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str | AnalysisFailure:
        if self.client is None:
            return _missing_credentials()
        try:
            return await self.client.generate(
                model=model, prompt=prompt, image_data_url=image_data_url
            )
        except UpstreamError as exc:
            _logger.warning(
                "Model call failed: model=%s status=%s error=%s",
                model,
                exc.status_code,
                exc,
            )
            return AnalysisFailure(
                error="Analysis failed",
                status_code=exc.status_code,
                details=str(exc),
            )


def extract_json_object(text: str) -> dict[str, object]:
    """Strip markdown fences and parse the first JSON object in the text."""
    cleaned = _FENCE_PATTERN.sub("", text).strip()
    match = _OBJECT_PATTERN.search(cleaned)
    if match:
        cleaned = match.group(0)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(str(exc)) from exc
    if not isinstance(parsed, dict):
        raise ResponseParseError("Model response is not a JSON object")
    return parsed


def _parse_analysis(text: str) -> FoodAnalysis | AnalysisFailure:
    try:
        payload = extract_json_object(text)
    except ResponseParseError:
        _logger.error("Failed to parse model response. Raw text: %s", text)
        return AnalysisFailure(
            error="Failed to parse AI response",
            status_code=500,
            raw_response=text,
        )

    model_error = payload.get("error")
    if model_error:
        return AnalysisFailure(error=str(model_error), status_code=422)

    try:
        return FoodAnalysis.model_validate(payload)
    except ValidationError as exc:
        _logger.error("Model response failed validation: %s", exc)
        return AnalysisFailure(
            error="Failed to parse AI response",
            status_code=500,
            raw_response=text,
            details=str(exc),
        )


def _missing_credentials() -> AnalysisFailure:
    return AnalysisFailure(
        error="Server configuration error: API key is not set", status_code=500
    )


def _to_data_url(image_data: str) -> str:
    """Return a data URL, wrapping a bare base64 payload if needed."""
    if image_data.startswith("data:"):
        return image_data
    mime_type = _detect_mime_type(image_data)
    return f"data:{mime_type};base64,{image_data}"


def _detect_mime_type(encoded: str) -> str:
    """Infer a basic image MIME type from the decoded file signature."""
    try:
        head = base64.b64decode(encoded[:16], validate=False)
    except (binascii.Error, ValueError):
        return "image/jpeg"
    if head.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
