"""Pydantic schemas for accounts and profiles."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

Region = Literal["EU", "US", "ASIA", "OC", "AF", "GLOBAL"]


class UserSettings(BaseModel):
    theme: Literal["dark", "light"] = "dark"
    language: Literal["en", "de"] = "en"
    private_account: bool = True


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=50)
    is_private: bool = True
    region: Region | None = None
    location: str | None = Field(None, max_length=120)
    timezone: str | None = None  # IANA name, used when region/location are omitted


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    avatar_url: str | None = None
    region: Region | None = None
    location: str | None = Field(None, max_length=120)


class ProfilePublic(BaseModel):
    id: UUID
    name: str
    handle: str
    avatar_url: str = ""
    region: str = "GLOBAL"
    location: str | None = None
    settings: UserSettings = UserSettings()
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProfileResponse(ProfilePublic):
    """Own profile, including the derived graph edges."""
    friends: list[UUID] = []
    incoming_requests: list[UUID] = []
    outgoing_requests: list[UUID] = []


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: ProfileResponse


class TokenRefresh(BaseModel):
    refresh_token: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
