"""Profile reads, updates, search and provisioning."""
import logging
import random
import re
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.core.config import settings
from moodfeed.core.errors import NotFoundError
from moodfeed.models.post import Post
from moodfeed.models.user import DEFAULT_SETTINGS, Profile
from moodfeed.schemas.user import ProfilePublic, ProfileResponse, ProfileUpdate, UserSettings
from moodfeed.services import location_service
from moodfeed.services.social_graph_service import get_friend_ids, get_incoming_ids, get_outgoing_ids

logger = logging.getLogger(__name__)

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/9.x/micah/svg?seed={seed}"


def make_handle(name: str) -> str:
    """'Jane Doe' -> 'janedoe#123456'."""
    base = re.sub(r"\s", "", name.lower()) or "user"
    return f"{base}#{random.randint(100000, 999999)}"


def make_avatar_url(seed: str) -> str:
    return AVATAR_URL_TEMPLATE.format(seed=re.sub(r"[^A-Za-z0-9#_-]", "", seed) or "moodfeed")


async def get_profile(db: AsyncSession, profile_id: UUID) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    return result.scalar_one_or_none()


async def require_profile(db: AsyncSession, profile_id: UUID) -> Profile:
    profile = await get_profile(db, profile_id)
    if profile is None:
        raise NotFoundError("User not found", kind="USER_NOT_FOUND")
    return profile


async def _unused_handle(db: AsyncSession, name: str) -> str:
    for _ in range(10):
        handle = make_handle(name)
        taken = await db.execute(select(Profile.id).where(Profile.handle == handle))
        if taken.first() is None:
            return handle
    # 10 collisions in a 900k space: widen the suffix instead of looping forever
    return f"{make_handle(name)}{random.randint(0, 9999):04d}"


async def create_profile(
    db: AsyncSession,
    user_id: UUID,
    name: str,
    *,
    is_private: bool = True,
    region: str | None = None,
    location: str | None = None,
    timezone: str | None = None,
) -> Profile:
    """Insert the profile row for an account. Region/location fall back to the timezone."""
    handle = await _unused_handle(db, name)
    profile = Profile(
        id=user_id,
        name=name,
        handle=handle,
        avatar_url=make_avatar_url(name + handle.split("#", 1)[1]),
        region=region or location_service.detect_region(timezone),
        location=location or location_service.city_from_timezone(timezone),
        settings={**DEFAULT_SETTINGS, "private_account": is_private},
    )
    db.add(profile)
    await db.flush()
    await db.refresh(profile)
    return profile


async def refresh_post_snapshots(db: AsyncSession, profile: Profile) -> int:
    """Rewrite the display fields of the author snapshot on the profile's posts.

    Each snapshot keeps the settings captured at post time, so a post without
    an explicit flag keeps the visibility the account had when it was posted.
    """
    display = {k: v for k, v in profile.snapshot().items() if k != "settings"}
    result = await db.execute(select(Post).where(Post.user_id == profile.id))
    posts = result.scalars().all()
    for post in posts:
        post.user_snapshot = {**(post.user_snapshot or {}), **display}
    await db.flush()
    return len(posts)


async def update_profile(db: AsyncSession, profile: Profile, data: ProfileUpdate) -> Profile:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    if changes:
        await db.flush()
        refreshed = await refresh_post_snapshots(db, profile)
        logger.info("Profile %s updated (%s), %d post snapshots refreshed", profile.id, ", ".join(changes), refreshed)
    return profile


async def update_settings(db: AsyncSession, profile: Profile, new_settings: UserSettings) -> Profile:
    """Replace account settings. Applies to posts created from now on."""
    profile.settings = new_settings.model_dump()
    await db.flush()
    logger.info("Settings for %s updated (private_account=%s)", profile.id, new_settings.private_account)
    return profile


async def search_profiles(db: AsyncSession, viewer: Profile, query: str) -> list[Profile]:
    """Case-insensitive substring match on name or handle, excluding the viewer."""
    needle = query.strip().lower()
    if not needle:
        return []
    escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    result = await db.execute(
        select(Profile)
        .where(
            or_(
                func.lower(Profile.name).like(pattern, escape="\\"),
                func.lower(Profile.handle).like(pattern, escape="\\"),
            ),
            Profile.id != viewer.id,
        )
        .order_by(Profile.name)
        .limit(settings.SEARCH_LIMIT)
    )
    return list(result.scalars().all())


def profile_to_public(profile: Profile) -> ProfilePublic:
    return ProfilePublic(
        id=profile.id,
        name=profile.name,
        handle=profile.handle,
        avatar_url=profile.avatar_url or "",
        region=profile.region or "GLOBAL",
        location=profile.location,
        settings=UserSettings(**{**DEFAULT_SETTINGS, **(profile.settings or {})}),
        created_at=profile.created_at,
    )


async def profile_to_response(db: AsyncSession, profile: Profile) -> ProfileResponse:
    public = profile_to_public(profile)
    return ProfileResponse(
        **public.model_dump(),
        friends=sorted(await get_friend_ids(db, profile.id), key=str),
        incoming_requests=await get_incoming_ids(db, profile.id),
        outgoing_requests=await get_outgoing_ids(db, profile.id),
    )
