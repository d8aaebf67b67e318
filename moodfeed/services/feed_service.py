"""Post creation, scoped feed, likes and comments."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from moodfeed.core.config import settings
from moodfeed.core.errors import NotFoundError, ValidationError
from moodfeed.db.session import insert_ignore
from moodfeed.models.comment import Comment
from moodfeed.models.engagement import PostLike
from moodfeed.models.post import Post
from moodfeed.models.user import Profile
from moodfeed.schemas.mood import MoodResult
from moodfeed.schemas.post import CommentResponse, FeedScope, PostCreate, PostResponse
from moodfeed.services import location_service
from moodfeed.services.social_graph_service import get_friend_ids
from moodfeed.services.visibility import is_visible

logger = logging.getLogger(__name__)


def _with_engagement(q):
    # likes/comments are written with Core statements, always reload them
    return q.options(selectinload(Post.likes), selectinload(Post.comments)).execution_options(populate_existing=True)


async def create_post(db: AsyncSession, author: Profile, data: PostCreate) -> Post:
    """Store a post tagged with the author's region/location at post time."""
    post = Post(
        user_id=author.id,
        user_snapshot=author.snapshot(),
        image_src=data.image_src,
        mood=data.mood.model_dump(),
        region=author.region or "GLOBAL",
        location=author.location or location_service.city_from_timezone(),
        is_public=data.is_public,
        likes=[],
        comments=[],
    )
    db.add(post)
    await db.flush()
    logger.info("Post %s by %s (region=%s, is_public=%s)", post.id, author.id, post.region, post.is_public)
    return post


async def get_feed(
    db: AsyncSession,
    viewer: Profile,
    scope: FeedScope,
    limit: int | None = None,
    before: datetime | None = None,
) -> list[Post]:
    """Newest-first page of posts the viewer may see in scope.

    The page is cut before visibility filtering, so a page can hold fewer
    than ``limit`` posts; ``before`` continues from the oldest candidate.
    """
    page_size = min(limit or settings.FEED_PAGE_SIZE, settings.FEED_PAGE_SIZE)
    # inner join: posts whose author profile is gone never surface
    q = (
        select(Post)
        .join(Profile, Post.user_id == Profile.id)
        .order_by(desc(Post.created_at))
        .limit(page_size)
    )
    if scope == FeedScope.EUROPE:
        q = q.where(Post.region == settings.EUROPE_REGION)
    if before is not None:
        q = q.where(Post.created_at < before)
    result = await db.execute(_with_engagement(q))
    candidates = result.scalars().all()
    friend_ids = await get_friend_ids(db, viewer.id)
    return [p for p in candidates if is_visible(viewer.id, friend_ids, p, scope)]


async def _get_post(db: AsyncSession, post_id: UUID) -> Post:
    result = await db.execute(_with_engagement(select(Post).where(Post.id == post_id)))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found", kind="POST_NOT_FOUND")
    return post


async def get_visible_post(db: AsyncSession, viewer: Profile, post_id: UUID) -> Post:
    """A single post, or NotFound when it is missing or hidden from the viewer."""
    post = await _get_post(db, post_id)
    friend_ids = await get_friend_ids(db, viewer.id)
    if not is_visible(viewer.id, friend_ids, post, FeedScope.GLOBAL):
        raise NotFoundError("Post not found", kind="POST_NOT_FOUND")
    return post


async def toggle_like(db: AsyncSession, post_id: UUID, user: Profile) -> tuple[bool, int]:
    """Flip the user's like on a post they can see. Returns (liked, likes_count)."""
    await get_visible_post(db, user, post_id)
    removed = await db.execute(delete(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user.id))
    liked = False
    if (removed.rowcount or 0) == 0:
        await insert_ignore(db, PostLike, post_id=post_id, user_id=user.id)
        liked = True
    count = await db.execute(select(func.count()).select_from(PostLike).where(PostLike.post_id == post_id))
    return liked, count.scalar() or 0


async def add_comment(db: AsyncSession, post_id: UUID, user: Profile, text: str) -> Comment:
    text = text.strip()
    if not text:
        raise ValidationError("Comment cannot be empty", kind="EMPTY_COMMENT")
    await get_visible_post(db, user, post_id)
    comment = Comment(
        post_id=post_id,
        user_id=user.id,
        username=user.name,
        avatar_url=user.avatar_url or "",
        text=text,
    )
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment


def comment_to_response(comment: Comment) -> CommentResponse:
    return CommentResponse.model_validate(comment)


def post_to_response(post: Post, viewer_id: UUID | None = None) -> PostResponse:
    likes = [like.user_id for like in post.likes]
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        user_snapshot=post.user_snapshot or {},
        image_src=post.image_src,
        mood=MoodResult(**post.mood),
        region=post.region,
        location=post.location,
        is_public=post.is_public,
        likes=likes,
        comments=[comment_to_response(c) for c in post.comments],
        is_liked=viewer_id in likes if viewer_id else False,
        created_at=post.created_at,
    )
