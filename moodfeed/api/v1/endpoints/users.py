"""Profile endpoints: own profile, settings, search, lookup."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_current_profile, get_db
from moodfeed.models.user import Profile
from moodfeed.schemas.user import ProfilePublic, ProfileResponse, ProfileUpdate, UserSettings
from moodfeed.services.profile_service import (
    profile_to_public,
    profile_to_response,
    require_profile,
    search_profiles,
    update_profile,
    update_settings,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return await profile_to_response(db, current_user)


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    data: ProfileUpdate,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    profile = await update_profile(db, current_user, data)
    return await profile_to_response(db, profile)


@router.put("/me/settings", response_model=ProfileResponse)
async def update_my_settings(
    data: UserSettings,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Replace account settings. Privacy changes apply to existing posts without an explicit flag."""
    profile = await update_settings(db, current_user, data)
    return await profile_to_response(db, profile)


@router.get("/search", response_model=list[ProfilePublic])
async def search_users(
    q: str = Query("", max_length=100),
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return [profile_to_public(p) for p in await search_profiles(db, current_user, q)]


@router.get("/{user_id}", response_model=ProfilePublic)
async def get_user(
    user_id: UUID,
    current_user: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return profile_to_public(await require_profile(db, user_id))
