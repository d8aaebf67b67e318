"""Direct messages and friend-derived chat threads."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from moodfeed.core.config import settings
from moodfeed.core.errors import NotFoundError, ValidationError
from moodfeed.models.message import Message
from moodfeed.models.user import Profile
from moodfeed.schemas.message import ChatThread, MessageCreate, MessageResponse, SharedPostPreview
from moodfeed.schemas.mood import MoodResult
from moodfeed.services.feed_service import get_visible_post
from moodfeed.services.profile_service import profile_to_public, require_profile
from moodfeed.services.social_graph_service import are_friends, get_friendships

logger = logging.getLogger(__name__)


def _between(a: UUID, b: UUID):
    return or_(
        and_(Message.sender_id == a, Message.receiver_id == b),
        and_(Message.sender_id == b, Message.receiver_id == a),
    )


async def _last_message(db: AsyncSession, a: UUID, b: UUID) -> Message | None:
    result = await db.execute(select(Message).where(_between(a, b)).order_by(desc(Message.created_at)).limit(1))
    return result.scalar_one_or_none()


async def get_threads(db: AsyncSession, viewer: Profile) -> list[ChatThread]:
    """One thread per friend, most recent activity first."""
    threads = []
    for friend, edge in await get_friendships(db, viewer.id):
        last = await _last_message(db, viewer.id, friend.id)
        if last is not None:
            preview = last.content or ("Shared a post" if last.shared_post_id else "")
            timestamp = last.created_at
        else:
            preview, timestamp = None, edge.created_at
        threads.append(
            ChatThread(
                id=f"c_{friend.id}",
                participant_id=friend.id,
                user=profile_to_public(friend),
                last_message=preview,
                last_sender_id=last.sender_id if last else None,
                timestamp=timestamp,
            )
        )
    threads.sort(key=lambda t: t.timestamp, reverse=True)
    return threads


async def get_messages(
    db: AsyncSession,
    viewer: Profile,
    friend_id: UUID,
    since: datetime | None = None,
) -> list[Message]:
    """Conversation with friend_id, oldest first. ``since`` returns only newer messages."""
    await require_profile(db, friend_id)
    q = (
        select(Message)
        .where(_between(viewer.id, friend_id))
        .order_by(Message.created_at)
        .options(selectinload(Message.shared_post))
    )
    if since is not None:
        q = q.where(Message.created_at > since)
    result = await db.execute(q)
    return list(result.scalars().all())


async def send_message(db: AsyncSession, viewer: Profile, receiver_id: UUID, data: MessageCreate) -> Message:
    content = data.content.strip()
    if not content and data.shared_post_id is None:
        raise ValidationError("Message cannot be empty", kind="EMPTY_MESSAGE")
    if receiver_id == viewer.id:
        raise ValidationError("Cannot message yourself", kind="SELF_MESSAGE")
    await require_profile(db, receiver_id)
    if settings.DM_REQUIRE_FRIENDSHIP and not await are_friends(db, viewer.id, receiver_id):
        raise ValidationError("You can only message friends", kind="NOT_FRIENDS")
    shared_post = None
    if data.shared_post_id is not None:
        shared_post = await get_visible_post(db, viewer, data.shared_post_id)
    message = Message(
        sender_id=viewer.id,
        receiver_id=receiver_id,
        content=content,
        shared_post_id=data.shared_post_id,
        shared_post=shared_post,
    )
    db.add(message)
    await db.flush()
    logger.debug("Message %s -> %s", viewer.id, receiver_id)
    return message


def message_to_response(message: Message) -> MessageResponse:
    post = message.shared_post
    shared = SharedPostPreview(
        id=post.id,
        user_id=post.user_id,
        user_snapshot=post.user_snapshot or {},
        image_src=post.image_src,
        mood=MoodResult(**post.mood),
        is_public=post.is_public,
        created_at=post.created_at,
    ) if post else None
    return MessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        receiver_id=message.receiver_id,
        content=message.content,
        created_at=message.created_at,
        shared_post_id=message.shared_post_id,
        shared_post=shared,
    )
