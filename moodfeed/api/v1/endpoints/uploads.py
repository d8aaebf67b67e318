"""Upload endpoint for selfie images. All media is stored per-user."""
from fastapi import APIRouter, Depends, File, UploadFile

from moodfeed.api.deps import get_current_profile
from moodfeed.core.errors import ValidationError
from moodfeed.models.user import Profile
from moodfeed.services.storage_service import get_selfie_store

router = APIRouter(prefix="/uploads", tags=["uploads"])

IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
MAX_IMAGE_MB = 5

EXT_MAP = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def validate_image(file: UploadFile) -> str:
    """Return the file extension for an allowed image type."""
    content_type = file.content_type or ""
    if content_type not in IMAGE_TYPES:
        raise ValidationError(
            f"Invalid file type: {content_type or 'unknown'}. Allowed: {', '.join(sorted(IMAGE_TYPES))}",
            kind="INVALID_FILE_TYPE",
        )
    return EXT_MAP[content_type]


async def read_image(file: UploadFile, max_size_mb: int = MAX_IMAGE_MB) -> bytes:
    data = await file.read()
    if not data:
        raise ValidationError("Empty file", kind="EMPTY_FILE")
    if len(data) > max_size_mb * 1024 * 1024:
        raise ValidationError(f"File too large. Max {max_size_mb}MB", kind="FILE_TOO_LARGE")
    return data


@router.post("/selfie")
async def upload_selfie(
    file: UploadFile = File(...),
    current_user: Profile = Depends(get_current_profile),
):
    """Store a captured selfie. Returns the URL to use as a post's image_src."""
    ext = validate_image(file)
    data = await read_image(file)
    url = get_selfie_store().save_selfie(current_user.id, data, ext)
    return {"url": url}
