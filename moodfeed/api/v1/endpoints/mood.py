"""Mood scoring endpoint."""
from fastapi import APIRouter, Depends, File, UploadFile

from moodfeed.api.deps import get_current_profile, get_scorer
from moodfeed.api.v1.endpoints.uploads import read_image, validate_image
from moodfeed.models.user import Profile
from moodfeed.schemas.mood import MoodResult
from moodfeed.services.mood_service import MoodScorer

router = APIRouter(prefix="/mood", tags=["mood"])


@router.post("", response_model=MoodResult)
async def score_mood(
    file: UploadFile = File(...),
    current_user: Profile = Depends(get_current_profile),
    scorer: MoodScorer = Depends(get_scorer),
):
    """Score a selfie. Scoring failures return the fixed fallback mood, never an error."""
    validate_image(file)
    data = await read_image(file)
    return await scorer.score(data, file.content_type or "image/jpeg")
