"""Scoped feed endpoint."""
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_current_profile, get_db
from moodfeed.core.config import settings
from moodfeed.models.user import Profile
from moodfeed.schemas.post import FeedScope, PostResponse
from moodfeed.services.feed_service import get_feed, post_to_response

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=list[PostResponse])
async def get_feed_endpoint(
    scope: FeedScope = Query(FeedScope.FRIENDS),
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=settings.FEED_PAGE_SIZE),
    before: datetime | None = Query(None, description="Only posts created before this time"),
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    posts = await get_feed(db, current_user, scope, limit=limit, before=before)
    return [post_to_response(p, viewer_id=current_user.id) for p in posts]
