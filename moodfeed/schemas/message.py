"""Pydantic schemas for direct messages and chat threads."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from moodfeed.schemas.mood import MoodResult
from moodfeed.schemas.user import ProfilePublic


class MessageCreate(BaseModel):
    content: str = Field(default="", max_length=2000)
    shared_post_id: UUID | None = None


class SharedPostPreview(BaseModel):
    """Projection of a shared post; the author snapshot is as of post time."""
    id: UUID
    user_id: UUID
    user_snapshot: dict
    image_src: str
    mood: MoodResult
    is_public: bool | None = None
    created_at: datetime


class MessageResponse(BaseModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    content: str
    created_at: datetime
    shared_post_id: UUID | None = None
    shared_post: SharedPostPreview | None = None


class ChatThread(BaseModel):
    id: str
    participant_id: UUID
    user: ProfilePublic
    last_message: str | None = None
    last_sender_id: UUID | None = None
    timestamp: datetime
