"""Authentication business logic and profile provisioning."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.core.errors import AuthError, ConflictError, ProfileProvisioningError, SetupRequiredError, classify_db_error
from moodfeed.core.security import create_access_token, create_refresh_token, get_password_hash, verify_password
from moodfeed.models.user import Profile, User
from moodfeed.schemas.user import UserCreate
from moodfeed.services.profile_service import create_profile, get_profile

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def register(db: AsyncSession, data: UserCreate) -> tuple[User, Profile]:
    """Create the account and its profile in one transaction."""
    if await get_user_by_email(db, data.email):
        raise ConflictError("Email already registered", kind="ALREADY_REGISTERED")
    user = User(email=data.email.lower(), password_hash=get_password_hash(data.password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("Email already registered", kind="ALREADY_REGISTERED") from exc
    profile = await create_profile(
        db,
        user.id,
        data.name,
        is_private=data.is_private,
        region=data.region,
        location=data.location,
        timezone=data.timezone,
    )
    logger.info("Registered %s (%s)", user.id, profile.handle)
    return user, profile


async def ensure_profile(db: AsyncSession, user: User) -> Profile:
    """Return the account's profile, creating a default one if it never got written.

    Accounts can exist without a profile (imported users, a provisioning
    step that failed halfway); they must not end up authenticated with no
    identity.
    """
    profile = await get_profile(db, user.id)
    if profile is not None:
        return profile
    logger.warning("Profile missing for %s, running fallback provisioning", user.id)
    try:
        return await create_profile(db, user.id, user.email.split("@", 1)[0])
    except SQLAlchemyError as exc:
        err = classify_db_error(exc) if isinstance(exc, DBAPIError) else None
        if isinstance(err, SetupRequiredError):
            raise err from exc
        raise ProfileProvisioningError("Could not create your profile, please contact support.") from exc


async def authenticate(db: AsyncSession, email: str, password: str) -> tuple[User, Profile]:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password", kind="INVALID_LOGIN")
    return user, await ensure_profile(db, user)


def create_tokens_for_user(user: User) -> tuple[str, str]:
    return create_access_token(user.id), create_refresh_token(user.id)
