"""Mood scoring of selfies with Gemini on Vertex AI.

The scorer never raises: any failure (SDK missing, scoring disabled,
network error, safety block, malformed output) yields FALLBACK_MOOD.
"""
import json
import logging
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from moodfeed.core.config import settings
from moodfeed.schemas.mood import FALLBACK_MOOD, MoodResult

logger = logging.getLogger(__name__)

MOOD_PROMPT = """Analyze this selfie and generate a funny, slightly exaggerated, meme-worthy 'mood diagnosis'.
It should be in the style of viral internet content (e.g. '93% Done with Life', '110% Chaos Energy').

Return JSON with:
- mood_percentage: A number between 0 and 100 representing intensity.
- mood_label: Short, punchy title (max 5 words).
- witty_comment: A one-sentence roast or funny observation about the expression.
- accent_color: A hex code string that matches the vibe (e.g. #FF0000 for angry, #00FF00 for happy).
"""

MOOD_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "mood_percentage": {"type": "number"},
        "mood_label": {"type": "string"},
        "witty_comment": {"type": "string"},
        "accent_color": {"type": "string"},
    },
    "required": ["mood_percentage", "mood_label", "witty_comment", "accent_color"],
}


def extract_json_from_text(text: str) -> dict[str, Any] | None:
    """Parse a JSON object, tolerating markdown code fences around it."""
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError:
        pass
    for pattern in (r"```(?:json)?\s*([\s\S]*?)\s*```", r"\{[\s\S]*\}"):
        for match in re.findall(pattern, text):
            try:
                return json.loads(match.strip())
            except json.JSONDecodeError:
                continue
    return None


def parse_mood(payload: dict[str, Any]) -> MoodResult:
    """Map the model's JSON onto MoodResult. Raises on missing or invalid fields."""
    percentage = round(float(payload["mood_percentage"]))
    return MoodResult(
        percentage=max(0, min(100, percentage)),
        label=str(payload["mood_label"]).strip(),
        description=str(payload.get("witty_comment", "")).strip(),
        color_hex=str(payload["accent_color"]).strip(),
    )


def strip_data_url(image: str) -> str:
    """'data:image/jpeg;base64,AAAA' -> 'AAAA'."""
    return image.split(",", 1)[1] if image.startswith("data:") and "," in image else image


class MoodScorer:
    def __init__(self, model_name: str | None = None, project_id: str | None = None, location: str | None = None):
        self.model_name = model_name or settings.MOOD_MODEL
        self._project_id = project_id or settings.GCP_PROJECT_ID
        self._location = location or settings.GCP_LOCATION
        self._model = None

    def _initialize(self):
        if self._model is not None:
            return self._model
        import vertexai
        from vertexai.generative_models import GenerativeModel

        if self._project_id:
            vertexai.init(project=self._project_id, location=self._location)
        else:
            # Application Default Credentials pick the project
            vertexai.init(location=self._location)
        self._model = GenerativeModel(self.model_name)
        return self._model

    async def _generate(self, image: bytes, mime_type: str) -> str:
        from vertexai.generative_models import GenerationConfig, Part

        model = self._initialize()
        response = await model.generate_content_async(
            [Part.from_data(data=image, mime_type=mime_type), MOOD_PROMPT],
            generation_config=GenerationConfig(
                response_mime_type="application/json",
                response_schema=MOOD_RESPONSE_SCHEMA,
            ),
        )
        return response.text or ""

    async def score(self, image: bytes, mime_type: str = "image/jpeg") -> MoodResult:
        if not settings.MOOD_SCORING_ENABLED:
            return FALLBACK_MOOD
        if not image:
            logger.info("Empty image, returning fallback mood")
            return FALLBACK_MOOD
        try:
            text = await self._generate(image, mime_type)
        except Exception:
            logger.warning("Mood scoring call failed, returning fallback", exc_info=True)
            return FALLBACK_MOOD
        payload = extract_json_from_text(text) if text else None
        if not payload:
            logger.warning("Mood scoring returned no JSON, returning fallback")
            return FALLBACK_MOOD
        try:
            return parse_mood(payload)
        except (KeyError, TypeError, ValueError, PydanticValidationError):
            logger.warning("Mood scoring returned malformed JSON %r, returning fallback", payload)
            return FALLBACK_MOOD


_scorer: MoodScorer | None = None


def get_mood_scorer() -> MoodScorer:
    global _scorer
    if _scorer is None:
        _scorer = MoodScorer()
    return _scorer
