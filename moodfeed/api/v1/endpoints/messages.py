"""Direct messaging: threads, history (pollable with ?since=), send."""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_current_profile, get_db
from moodfeed.models.user import Profile
from moodfeed.schemas.message import ChatThread, MessageCreate, MessageResponse
from moodfeed.services.message_service import get_messages, get_threads, message_to_response, send_message

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/threads", response_model=list[ChatThread])
async def list_threads(
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return await get_threads(db, current_user)


@router.get("/{friend_id}", response_model=list[MessageResponse])
async def list_messages(
    friend_id: UUID,
    since: datetime | None = Query(None, description="Only messages created after this time"),
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    messages = await get_messages(db, current_user, friend_id, since=since)
    return [message_to_response(m) for m in messages]


@router.post("/{receiver_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    receiver_id: UUID,
    data: MessageCreate,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    message = await send_message(db, current_user, receiver_id, data)
    await db.commit()
    return message_to_response(message)
