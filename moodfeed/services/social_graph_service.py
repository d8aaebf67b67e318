"""Friend-request lifecycle over the friendships / friend_requests edge tables.

Every mutation is a handful of statements in the caller's transaction
(committed by get_db), and writes go through insert-or-ignore / delete on
composite keys, so concurrent requests to the same profile union rather
than overwrite, and a reader never sees one side of an edge without the
other.
"""
import logging
from uuid import UUID

from sqlalchemy import and_, delete, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.core.errors import NotFoundError, ValidationError
from moodfeed.db.session import insert_ignore
from moodfeed.models.engagement import FriendRequest, Friendship
from moodfeed.models.user import Profile
from moodfeed.schemas.social import SendRequestStatus

logger = logging.getLogger(__name__)


async def _require_profile(db: AsyncSession, profile_id: UUID) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise NotFoundError("User not found", kind="USER_NOT_FOUND")
    return profile


async def are_friends(db: AsyncSession, a: UUID, b: UUID) -> bool:
    if a == b:
        return False
    key = Friendship.key(a, b)
    result = await db.execute(
        select(Friendship.user_low_id).where(
            Friendship.user_low_id == key["user_low_id"],
            Friendship.user_high_id == key["user_high_id"],
        )
    )
    return result.first() is not None


async def get_friend_ids(db: AsyncSession, user_id: UUID) -> set[UUID]:
    result = await db.execute(
        select(Friendship.user_low_id, Friendship.user_high_id).where(
            or_(Friendship.user_low_id == user_id, Friendship.user_high_id == user_id)
        )
    )
    return {high if low == user_id else low for low, high in result.all()}


async def get_friendships(db: AsyncSession, user_id: UUID) -> list[tuple[Profile, Friendship]]:
    """Friends of user_id with the edge row (for its created_at)."""
    result = await db.execute(
        select(Profile, Friendship)
        .join(
            Friendship,
            or_(
                and_(Friendship.user_low_id == user_id, Friendship.user_high_id == Profile.id),
                and_(Friendship.user_high_id == user_id, Friendship.user_low_id == Profile.id),
            ),
        )
        .order_by(Profile.name)
    )
    return [(profile, edge) for profile, edge in result.all()]


async def get_incoming_ids(db: AsyncSession, user_id: UUID) -> list[UUID]:
    result = await db.execute(
        select(FriendRequest.requester_id)
        .where(FriendRequest.target_id == user_id)
        .order_by(desc(FriendRequest.created_at))
    )
    return list(result.scalars().all())


async def get_outgoing_ids(db: AsyncSession, user_id: UUID) -> list[UUID]:
    result = await db.execute(
        select(FriendRequest.target_id)
        .where(FriendRequest.requester_id == user_id)
        .order_by(desc(FriendRequest.created_at))
    )
    return list(result.scalars().all())


async def has_pending_request(db: AsyncSession, requester_id: UUID, target_id: UUID) -> bool:
    result = await db.execute(
        select(FriendRequest.requester_id).where(
            FriendRequest.requester_id == requester_id,
            FriendRequest.target_id == target_id,
        )
    )
    return result.first() is not None


async def send_request(db: AsyncSession, requester: Profile, target_id: UUID) -> SendRequestStatus:
    """Record requester -> target. Idempotent; already-friends is a no-op."""
    if requester.id == target_id:
        raise ValidationError("Cannot send a friend request to yourself", kind="SELF_REQUEST")
    await _require_profile(db, target_id)
    if await are_friends(db, requester.id, target_id):
        return SendRequestStatus.ALREADY_FRIENDS
    created = await insert_ignore(db, FriendRequest, requester_id=requester.id, target_id=target_id)
    if created:
        logger.info("Friend request %s -> %s", requester.id, target_id)
    return SendRequestStatus.SENT


async def accept_request(db: AsyncSession, accepter: Profile, requester_id: UUID) -> bool:
    """Turn a pending requester -> accepter edge into a friendship."""
    if accepter.id == requester_id:
        raise ValidationError("Cannot accept your own request", kind="SELF_REQUEST")
    if not await has_pending_request(db, requester_id, accepter.id):
        if await are_friends(db, accepter.id, requester_id):
            return True
        raise NotFoundError("Friend request not found", kind="REQUEST_NOT_FOUND")
    # a crossing request in the other direction is settled by the same accept
    await db.execute(
        delete(FriendRequest).where(
            or_(
                and_(FriendRequest.requester_id == requester_id, FriendRequest.target_id == accepter.id),
                and_(FriendRequest.requester_id == accepter.id, FriendRequest.target_id == requester_id),
            )
        )
    )
    await insert_ignore(db, Friendship, **Friendship.key(accepter.id, requester_id))
    logger.info("Friend request %s -> %s accepted", requester_id, accepter.id)
    return True


async def reject_request(db: AsyncSession, target: Profile, requester_id: UUID) -> bool:
    """Drop an incoming request. Returns whether one existed."""
    if target.id == requester_id:
        raise ValidationError("Cannot reject your own request", kind="SELF_REQUEST")
    result = await db.execute(
        delete(FriendRequest).where(
            FriendRequest.requester_id == requester_id,
            FriendRequest.target_id == target.id,
        )
    )
    return (result.rowcount or 0) > 0


async def cancel_request(db: AsyncSession, requester: Profile, target_id: UUID) -> bool:
    """Withdraw an outgoing request. Returns whether one existed."""
    if requester.id == target_id:
        raise ValidationError("Cannot cancel a request to yourself", kind="SELF_REQUEST")
    result = await db.execute(
        delete(FriendRequest).where(
            FriendRequest.requester_id == requester.id,
            FriendRequest.target_id == target_id,
        )
    )
    return (result.rowcount or 0) > 0


async def remove_friend(db: AsyncSession, user: Profile, friend_id: UUID) -> bool:
    if user.id == friend_id:
        raise ValidationError("Cannot unfriend yourself", kind="SELF_REQUEST")
    key = Friendship.key(user.id, friend_id)
    result = await db.execute(
        delete(Friendship).where(
            Friendship.user_low_id == key["user_low_id"],
            Friendship.user_high_id == key["user_high_id"],
        )
    )
    removed = (result.rowcount or 0) > 0
    if removed:
        logger.info("Friendship %s <-> %s removed", user.id, friend_id)
    return removed


async def list_requests(db: AsyncSession, user: Profile) -> tuple[list[Profile], list[Profile]]:
    """(incoming, outgoing) request profiles, newest first."""
    incoming = await db.execute(
        select(Profile)
        .join(FriendRequest, FriendRequest.requester_id == Profile.id)
        .where(FriendRequest.target_id == user.id)
        .order_by(desc(FriendRequest.created_at))
    )
    outgoing = await db.execute(
        select(Profile)
        .join(FriendRequest, FriendRequest.target_id == Profile.id)
        .where(FriendRequest.requester_id == user.id)
        .order_by(desc(FriendRequest.created_at))
    )
    return list(incoming.scalars().all()), list(outgoing.scalars().all())
