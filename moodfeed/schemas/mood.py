"""Mood scoring result schema."""
from pydantic import BaseModel, Field


class MoodResult(BaseModel):
    percentage: int = Field(..., ge=0, le=100)
    label: str = Field(..., min_length=1, max_length=80)
    description: str = ""
    color_hex: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")


FALLBACK_MOOD = MoodResult(
    percentage=69,
    label="Mysteriously Vague",
    description="The AI is confused by your overwhelming aura.",
    color_hex="#A855F7",
)
