"""Pydantic schemas for Post, Comment and the feed."""
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from moodfeed.schemas.mood import MoodResult


class FeedScope(str, Enum):
    FRIENDS = "FRIENDS"
    EUROPE = "EUROPE"
    GLOBAL = "GLOBAL"


class PostCreate(BaseModel):
    image_src: str = Field(..., min_length=1)
    mood: MoodResult
    is_public: bool | None = None  # omitted: follow the account privacy setting


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)


class CommentResponse(BaseModel):
    id: UUID
    user_id: UUID
    username: str
    avatar_url: str = ""
    text: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    id: UUID
    user_id: UUID
    user_snapshot: dict
    image_src: str
    mood: MoodResult
    region: str
    location: str | None = None
    is_public: bool | None = None
    likes: list[UUID] = []
    comments: list[CommentResponse] = []
    is_liked: bool = False
    created_at: datetime


class LikeResponse(BaseModel):
    post_id: UUID
    liked: bool
    likes_count: int
