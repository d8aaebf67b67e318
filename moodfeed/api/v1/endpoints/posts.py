"""Post creation, lookup, likes and comments."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_current_profile, get_db
from moodfeed.models.user import Profile
from moodfeed.schemas.post import CommentCreate, CommentResponse, LikeResponse, PostCreate, PostResponse
from moodfeed.services.feed_service import (
    add_comment,
    comment_to_response,
    create_post,
    get_visible_post,
    post_to_response,
    toggle_like,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    data: PostCreate,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    post = await create_post(db, current_user, data)
    await db.commit()
    return post_to_response(post, viewer_id=current_user.id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    post = await get_visible_post(db, current_user, post_id)
    return post_to_response(post, viewer_id=current_user.id)


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like_endpoint(
    post_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Like if not yet liked, otherwise unlike."""
    liked, count = await toggle_like(db, post_id, current_user)
    await db.commit()
    return LikeResponse(post_id=post_id, liked=liked, likes_count=count)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment_endpoint(
    post_id: UUID,
    data: CommentCreate,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    comment = await add_comment(db, post_id, current_user, data.text)
    await db.commit()
    return comment_to_response(comment)
