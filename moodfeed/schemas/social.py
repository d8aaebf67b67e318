"""Pydantic schemas for the friend graph."""
from enum import Enum

from pydantic import BaseModel

from moodfeed.schemas.user import ProfilePublic


class SendRequestStatus(str, Enum):
    SENT = "SENT"
    ALREADY_FRIENDS = "ALREADY_FRIENDS"


class SendRequestResponse(BaseModel):
    status: SendRequestStatus


class FriendRequests(BaseModel):
    incoming: list[ProfilePublic] = []
    outgoing: list[ProfilePublic] = []


class EdgeChange(BaseModel):
    changed: bool
