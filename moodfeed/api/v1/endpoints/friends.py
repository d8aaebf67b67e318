"""Friend graph endpoints: requests, accept/reject/cancel, unfriend."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_current_profile, get_db
from moodfeed.models.user import Profile
from moodfeed.schemas.social import EdgeChange, FriendRequests, SendRequestResponse
from moodfeed.schemas.user import ProfilePublic
from moodfeed.services import social_graph_service as graph
from moodfeed.services.profile_service import profile_to_public

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=list[ProfilePublic])
async def list_friends(
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return [profile_to_public(p) for p, _ in await graph.get_friendships(db, current_user.id)]


@router.get("/requests", response_model=FriendRequests)
async def list_friend_requests(
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    incoming, outgoing = await graph.list_requests(db, current_user)
    return FriendRequests(
        incoming=[profile_to_public(p) for p in incoming],
        outgoing=[profile_to_public(p) for p in outgoing],
    )


@router.post("/requests/{target_id}", response_model=SendRequestResponse)
async def send_friend_request(
    target_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Send a friend request. Idempotent; returns ALREADY_FRIENDS without changes."""
    result = await graph.send_request(db, current_user, target_id)
    await db.commit()
    return SendRequestResponse(status=result)


@router.post("/requests/{requester_id}/accept", response_model=EdgeChange)
async def accept_friend_request(
    requester_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    changed = await graph.accept_request(db, current_user, requester_id)
    await db.commit()
    return EdgeChange(changed=changed)


@router.post("/requests/{requester_id}/reject", response_model=EdgeChange)
async def reject_friend_request(
    requester_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    changed = await graph.reject_request(db, current_user, requester_id)
    await db.commit()
    return EdgeChange(changed=changed)


@router.delete("/requests/{target_id}", response_model=EdgeChange)
async def cancel_friend_request(
    target_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Withdraw your pending request to target_id."""
    changed = await graph.cancel_request(db, current_user, target_id)
    await db.commit()
    return EdgeChange(changed=changed)


@router.delete("/{friend_id}", response_model=EdgeChange)
async def remove_friend(
    friend_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    changed = await graph.remove_friend(db, current_user, friend_id)
    await db.commit()
    return EdgeChange(changed=changed)
