"""API dependencies: auth, db session, mood scorer."""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.core.errors import AuthError
from moodfeed.core.security import decode_token
from moodfeed.db.session import get_db
from moodfeed.models.user import Profile
from moodfeed.services.auth_service import ensure_profile, get_user_by_id
from moodfeed.services.mood_service import MoodScorer, get_mood_scorer

security = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_current_profile", "get_scorer"]


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """The authenticated viewer. Every service call receives it explicitly."""
    if not credentials:
        raise AuthError("Not authenticated")
    user_id = decode_token(credentials.credentials, "access")
    if user_id is None:
        raise AuthError("Invalid or expired token", kind="INVALID_TOKEN")
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise AuthError("User not found", kind="INVALID_TOKEN")
    return await ensure_profile(db, user)


def get_scorer() -> MoodScorer:
    return get_mood_scorer()
